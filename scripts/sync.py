"""
Review sync script.
Fetches trusted-channel YouTube reviews and scores their transcripts.

Usage:
    python scripts/sync.py --reviews               # Sync reviews for all phones
    python scripts/sync.py --reviews --limit=5     # Only the first 5 phones
    python scripts/sync.py --reviews --backend=gemini
"""
import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src import settings
from src.data_pipeline.review_sync import ReviewSync
from src.data_pipeline.sentiment_analyzer import SentimentAnalyzer, create_polarity_scorer
from src.data_pipeline.youtube_client import YouTubeReviewClient
from src.recommend.phone_client import PhoneDatabaseClient


def sync_reviews(limit=None, backend=None):
    """Sync YouTube reviews for catalog phones."""
    print("\n[*] Starting YouTube review sync...")

    # Missing credentials abort before any phone is touched
    try:
        youtube = YouTubeReviewClient(verbose=True)
        analyzer = SentimentAnalyzer(create_polarity_scorer(backend), verbose=True)
    except ValueError as e:
        print(f"[-] {e}")
        return False

    try:
        sync = ReviewSync(
            youtube_client=youtube,
            phone_client=PhoneDatabaseClient(),
            analyzer=analyzer,
            trusted_channels=settings.load_trusted_channels()
        )
        stats = sync.sync_all(limit=limit)
    except Exception as e:
        print(f"[-] Review sync failed: {e}")
        import traceback
        traceback.print_exc()
        return False

    print("\n" + "="*60)
    print("Summary")
    print("="*60)
    print(f"[+] Reviews synced: {stats.success}")
    print(f"[-] Failures: {stats.failed}")
    print(f"[*] Phones: {stats.phones}")
    print(f"[*] API quota used: ~{youtube.quota_used} units")

    return True


def main():
    parser = argparse.ArgumentParser(description='Sync data from external sources')
    parser.add_argument('--reviews', action='store_true', help='Sync YouTube reviews')
    parser.add_argument('--limit', type=int, help='Only sync the first N phones')
    parser.add_argument('--backend', choices=['afinn', 'gemini'], help='Sentiment backend (default: SENTIMENT_BACKEND)')

    args = parser.parse_args()

    # If no args, show help
    if not args.reviews:
        parser.print_help()
        return

    print("="*60)
    print("Data Sync")
    print("="*60)

    success = sync_reviews(limit=args.limit, backend=args.backend)

    print("\n" + "="*60)
    if success:
        print("[+] Sync completed successfully!")
    else:
        print("[-] Sync completed with errors")
    print("="*60)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
