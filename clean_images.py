#!/usr/bin/env python3
"""
Civic Reporter - Clean Stored Image Data
Nulls legacy image values (corruption sentinel, oversized or malformed
payloads) left in the reports table. Run once, or periodically with
--interval.
"""
import argparse
import os
import sys
import time

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.core.constants import IMAGE_CLEANUP_BATCH_SIZE
from src.crowdsource.image_cleanup import ImageCleanup
from src.crowdsource.image_validation import ImageValidator
from src.database.connection import DatabaseConnection
from src.database.report_store import ReportStore


def run_once(cleanup: ImageCleanup, dry_run: bool) -> None:
    stats = cleanup.run(dry_run=dry_run)

    print(f"\nReports scanned:     {stats.total_reports}")
    print(f"Invalid image data:  {stats.corrupted_count}")
    if dry_run:
        print("Dry run, nothing was changed")
    else:
        print(f"Fixed:               {stats.fixed_count}")
        if stats.failed_ids:
            print(f"Failed:              {', '.join(stats.failed_ids)}")


def main():
    parser = argparse.ArgumentParser(description="Null invalid image data stored on reports")
    parser.add_argument("--dry-run", action="store_true", help="Only count affected reports")
    parser.add_argument("--batch-size", type=int, default=IMAGE_CLEANUP_BATCH_SIZE)
    parser.add_argument("--batch-delay", type=float, default=0.1, help="Seconds between batches")
    parser.add_argument("--interval", type=int, default=0, help="Repeat every N minutes (0 = run once)")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings)
    if not settings.database_url:
        print("ERROR: DATABASE_URL not found in .env file")
        sys.exit(1)

    print("=" * 60)
    print("Civic Reporter - Image Data Cleanup")
    print("=" * 60)

    database = DatabaseConnection.from_settings(settings)
    cleanup = ImageCleanup(
        ReportStore(database),
        image_validator=ImageValidator(max_data_length=settings.max_image_data_length),
        batch_size=args.batch_size,
        batch_delay_seconds=args.batch_delay,
    )

    try:
        run_once(cleanup, args.dry_run)
        while args.interval > 0:
            print(f"\nNext run in {args.interval} minutes")
            time.sleep(args.interval * 60)
            run_once(cleanup, args.dry_run)
    except KeyboardInterrupt:
        print("\nStopped")
    finally:
        database.close()

    print("=" * 60)


if __name__ == "__main__":
    main()
