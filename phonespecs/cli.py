"""Command-line interface for ingesting and browsing phone specs."""

import argparse
import json
import logging
import sqlite3
import sys
from pathlib import Path
from typing import Any, List, Optional

from phonespecs.config import DB_PATH
from phonespecs.db import (
    PhoneStore,
    get_phone_detail,
    get_table_counts,
    init_db,
    list_brands,
    list_phones,
)
from phonespecs.errors import IngestError
from phonespecs.logging_config import setup_logging
from phonespecs.scraper import ingest_phone, parse_phone_page

__all__ = ["main", "parse_args", "show_stats"]


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Phone spec page ingester with SQLite storage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ingest one device page
  python -m phonespecs.cli ingest --brand SamsungPhones \\
      --url https://www.91mobiles.com/samsung-galaxy-s24-price-in-india --folder galaxy-s24

  # Parse a saved page without touching the database
  python -m phonespecs.cli parse data/galaxy-s24.html

  # Browse what has been stored
  python -m phonespecs.cli brands
  python -m phonespecs.cli phones 1
  python -m phonespecs.cli detail 3

  # Row counts
  python -m phonespecs.cli --stats
        """,
    )
    parser.add_argument("--db", default=DB_PATH, help=f"SQLite database path (default: {DB_PATH})")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug-level console logging")
    parser.add_argument("--no-log-file", action="store_true", help="Don't write the JSONL event log")
    parser.add_argument("--stats", action="store_true", help="Show database statistics and exit")

    sub = parser.add_subparsers(dest="command")

    ingest = sub.add_parser("ingest", help="Fetch a page and store its specs")
    ingest.add_argument("--brand", required=True, help="Brand name, e.g. SamsungPhones")
    ingest.add_argument("--url", required=True, help="Device spec page URL")
    ingest.add_argument("--folder", help="Stable phone identifier (default: page title)")

    parse = sub.add_parser("parse", help="Extract specs/images from a saved HTML file")
    parse.add_argument("file", type=Path)

    sub.add_parser("brands", help="List brands")

    phones = sub.add_parser("phones", help="List phones of a brand")
    phones.add_argument("brand_id", type=int)

    detail = sub.add_parser("detail", help="Show stored detail and images of a phone")
    detail.add_argument("phone_id", type=int)

    return parser.parse_args(argv)


def show_stats(db_path: str) -> None:
    """Display row counts per table."""
    init_db(db_path)
    print(f"\n{'='*50}")
    print(f"Database: {db_path}")
    print(f"{'='*50}")
    for table, count in get_table_counts(db_path).items():
        print(f"  {table}: {count}")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI. Returns the process exit code."""
    args = parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=not args.no_log_file,
    )

    if args.stats:
        show_stats(args.db)
        return 0

    if args.command == "ingest":
        try:
            result = ingest_phone(args.brand, args.url, folder_name=args.folder, store=PhoneStore(args.db))
        except (IngestError, sqlite3.Error) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        _print_json(result.to_dict())
        return 0

    if args.command == "parse":
        sheet, images = parse_phone_page(args.file.read_text(encoding="utf-8"))
        _print_json({**sheet.to_dict(), "images": images.to_dict()})
        return 0 if not sheet.is_empty() else 1

    init_db(args.db)
    if args.command == "brands":
        _print_json(list_brands(args.db))
    elif args.command == "phones":
        _print_json(list_phones(args.db, args.brand_id))
    elif args.command == "detail":
        detail = get_phone_detail(args.db, args.phone_id)
        if detail is None:
            print(f"No details stored for phone {args.phone_id}", file=sys.stderr)
            return 1
        _print_json(detail)
    else:
        print("No command given; see --help", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
