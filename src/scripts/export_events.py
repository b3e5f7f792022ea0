#!/usr/bin/env python3
"""
Export all saved calendar events to a file.

The file is named after the given year and month but contains every stored
date, matching the in-app export.

Usage:
    uv run python src/scripts/export_events.py --year 2026 --month 10
    uv run python src/scripts/export_events.py --format xlsx --output-dir /tmp
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import CalendarError
from core.log import configure_logging
from core.storage import get_medium
from services.calendar import CalendarSession
from services.persistence import PersistenceBridge


def main():
    today = date.today()
    parser = argparse.ArgumentParser(description="Export saved calendar events")
    parser.add_argument("--year", type=int, default=today.year, help="Year for the filename")
    parser.add_argument("--month", type=int, default=today.month, help="Month for the filename")
    parser.add_argument(
        "--format",
        choices=["json", "xlsx"],
        default="json",
        help="Export format (default: json)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to write to (default: configured output dir)",
    )
    parser.add_argument(
        "--backend",
        choices=["file", "sqlite"],
        default=None,
        help="Storage backend to read from (default: configured backend)",
    )

    args = parser.parse_args()
    configure_logging()

    try:
        session = CalendarSession(
            PersistenceBridge(get_medium(args.backend)), persist_on_load=False
        )
        session.go_to(args.year, args.month)
        if args.format == "xlsx":
            output_path = session.export_excel(args.output_dir)
        else:
            output_path = session.export_json(args.output_dir)
        print(f"\nExported {len(session.store)} events: {output_path}")
    except CalendarError as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
