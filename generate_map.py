#!/usr/bin/env python3
"""
Civic Reporter - Generate Interactive Reports Map
Loads reports from the database and writes an interactive HTML map.
"""
import argparse
import os
import sys
from datetime import datetime

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.crowdsource.report_handler import ReportHandler
from src.database.connection import DatabaseConnection
from src.database.report_store import ReportStore
from src.database.user_store import UserStore
from src.visualization.map_generator import create_reports_map


def main():
    parser = argparse.ArgumentParser(description="Generate an HTML map of civic reports")
    parser.add_argument("--status", help="Only reports with this status (e.g. PENDING)")
    parser.add_argument("--output", default="reports_map.html", help="Output HTML file")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings)
    if not settings.database_url:
        print("ERROR: DATABASE_URL not found in .env file")
        sys.exit(1)

    print("=" * 60)
    print("Civic Reporter - Generating Reports Map")
    print("=" * 60)

    database = DatabaseConnection.from_settings(settings)
    try:
        handler = ReportHandler(ReportStore(database), UserStore(database))

        print("\nLoading reports...")
        reports = handler.list_reports(status=args.status)
        print(f"Total reports found: {len(reports)}")

        stats = handler.get_statistics()
        print("\nStatistics:")
        for status, count in stats["by_status"].items():
            print(f"  - {status:<12} {count}")
        print(f"  - With image:   {stats['with_image']}")

        print("\nGenerating interactive map...")
        report_map = create_reports_map(
            reports,
            title=f"Civic Reporter - Reported Issues ({datetime.now().strftime('%Y-%m-%d %H:%M')})",
        )
        report_map.save(args.output)
    finally:
        database.close()

    print(f"\nMap saved to: {os.path.abspath(args.output)}")
    print("=" * 60)


if __name__ == "__main__":
    main()
