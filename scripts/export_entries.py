"""
Export journal entries for a date range as JSON.

Example:
  python scripts/export_entries.py --section school --start 2024-06-23 --end 2024-07-31
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner.config import get_settings
from planner.db import SPECIAL_TYPES, DbClient
from planner.dependencies import build_db_client

logger = logging.getLogger(__name__)


def export_entries(db: DbClient, section: str, start: date, end: date) -> dict:
    if section == "school":
        dates = db.list_school_dates(start, end)
        entries = [db.get_school_entry(d) for d in dates]
    else:
        dates = db.list_whatidid_dates(start, end)
        entries = [db.get_whatidid_entry(d) for d in dates]
    special = {}
    for entry_type in SPECIAL_TYPES:
        record = db.get_special_entry(entry_type)
        special[entry_type] = record.content if record else ""
    return {
        "section": section,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "entries": [entry.as_dict() for entry in entries if entry],
        "special": special,
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Export journal entries as JSON")
    parser.add_argument(
        "--section",
        choices=("school", "whatidid"),
        default="school",
        help="Which log to export",
    )
    parser.add_argument(
        "--start", type=date.fromisoformat, required=True, help="First date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--end", type=date.fromisoformat, required=True, help="Last date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Write to file instead of stdout"
    )
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    if args.end < args.start:
        logger.error("--end %s is before --start %s", args.end, args.start)
        return 2

    if settings.use_in_memory_backends or not settings.database_url:
        logger.error("Set DATABASE_URL to export; in-memory storage holds no entries")
        return 1

    db = build_db_client(settings)
    payload = export_entries(db, args.section, args.start, args.end)
    text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote %d entries to %s", len(payload["entries"]), args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
