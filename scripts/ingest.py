"""
Catalog ingestion script.
Imports phones from CSV and maintains derived scores.

Usage:
    python scripts/ingest.py --csv phone_data.csv    # Import / update phones
    python scripts/ingest.py --battery               # Recalculate battery scores
"""
import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.data_pipeline.catalog_ingestion import CatalogIngestor, recalculate_battery_scores
from src.recommend.phone_client import PhoneDatabaseClient


def import_csv(csv_path: Path):
    """Import phones from a CSV file."""
    print(f"\n[*] Reading CSV file: {csv_path}")

    if not csv_path.exists():
        print(f"[-] File not found: {csv_path}")
        return False

    try:
        ingestor = CatalogIngestor(PhoneDatabaseClient())
        stats = ingestor.ingest_csv(csv_path)
    except Exception as e:
        print(f"[-] Import failed: {e}")
        import traceback
        traceback.print_exc()
        return False

    print("\n" + "="*60)
    print("Import Summary")
    print("="*60)
    print(f"[+] Imported: {stats.imported} phones")
    print(f"[!] Skipped (invalid): {stats.skipped}")
    print(f"[-] Errors: {stats.failed}")
    print(f"[*] Total rows: {stats.total}")

    return stats.failed == 0


def update_battery_scores():
    """Recalculate battery scores for all phones."""
    print("\n[*] Updating battery scores...")

    try:
        updated = recalculate_battery_scores(PhoneDatabaseClient())
    except Exception as e:
        print(f"[-] Error updating battery scores: {e}")
        import traceback
        traceback.print_exc()
        return False

    print(f"\n[+] Successfully updated {updated} phone battery scores!")
    return True


def main():
    parser = argparse.ArgumentParser(description='Phone catalog ingestion')
    parser.add_argument('--csv', type=str, help='CSV file with phone data')
    parser.add_argument('--battery', action='store_true', help='Recalculate battery scores')

    args = parser.parse_args()

    # If no args, show help
    if not any(vars(args).values()):
        parser.print_help()
        return

    print("="*60)
    print("Catalog Ingestion")
    print("="*60)

    success = True

    if args.csv:
        if not import_csv(Path(args.csv)):
            success = False

    if args.battery:
        if not update_battery_scores():
            success = False

    print("\n" + "="*60)
    if success:
        print("[+] Ingestion completed successfully!")
    else:
        print("[-] Ingestion completed with errors")
    print("="*60)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
