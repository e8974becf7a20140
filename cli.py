#!/usr/bin/env python
"""
PhonePick CLI
One entry point for database setup, catalog ingestion, review sync and the API.

Usage:
    python cli.py setup
    python cli.py ingest --csv phone_data.csv
    python cli.py ingest --battery
    python cli.py sync --limit 5 --backend afinn
    python cli.py api --port 8000
"""
import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from scripts import ingest, setup, sync


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='cli.py', description='PhonePick command-line interface')
    commands = parser.add_subparsers(dest='command')

    commands.add_parser('setup', help='Create the phones and youtube_reviews tables')

    ingest_parser = commands.add_parser('ingest', help='Phone catalog import & score maintenance')
    ingest_parser.add_argument('--csv', type=Path, help='CSV file with phone data')
    ingest_parser.add_argument('--battery', action='store_true', help='Recalculate battery scores')

    sync_parser = commands.add_parser('sync', help='YouTube review sync')
    sync_parser.add_argument('--limit', type=int, help='Only sync the first N phones')
    sync_parser.add_argument('--backend', choices=['afinn', 'gemini'], help='Sentiment backend')

    api_parser = commands.add_parser('api', help='Start the API server')
    api_parser.add_argument('--host', default='0.0.0.0')
    api_parser.add_argument('--port', type=int, default=8000)
    api_parser.add_argument('--reload', action='store_true', help='Reload on code changes')

    return parser


def run_ingest(args) -> bool:
    if not args.csv and not args.battery:
        print("[!] Nothing to do: pass --csv PATH and/or --battery")
        return False

    success = True
    if args.csv and not ingest.import_csv(args.csv):
        success = False
    if args.battery and not ingest.update_battery_scores():
        success = False
    return success


def run_api(args) -> bool:
    import uvicorn
    uvicorn.run('src.api.main:app', host=args.host, port=args.port, reload=args.reload)
    return True


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == 'setup':
        success = setup.main()
    elif args.command == 'ingest':
        success = run_ingest(args)
    elif args.command == 'sync':
        success = sync.sync_reviews(limit=args.limit, backend=args.backend)
    else:
        success = run_api(args)

    return 0 if success else 1


if __name__ == '__main__':
    sys.exit(main())
