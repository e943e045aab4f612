"""Script to consolidate pending raw exports into the canonical store.

Reads CSV files from data/raw/ and appends their rows to data/data.csv, then
removes each merged file. Files that fail validation stay in data/raw/.

Usage:
    python scripts/merge_raw.py            # Merge data/raw/*.csv into data/data.csv
    python scripts/merge_raw.py --test     # Use data/test/ instead
    python scripts/merge_raw.py --init     # Create an empty store first if missing

Exit codes:
    0  merged, or nothing pending
    1  canonical store missing
    2  one or more sources rejected
"""

import argparse
import sys
from datetime import datetime

from roundlog.ingestion.merger import IngestionMerger
from roundlog.shared.config import Config
from roundlog.shared.exceptions import MissingStoreError
from roundlog.storage.record_store import RecordStore


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Consolidate pending raw CSV exports into the canonical store"
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="Operate on the test sandbox (data/test/) instead of data/.",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create an empty canonical store (header only) if it does not exist.",
    )
    args = parser.parse_args()
    Config.validate()

    store_path = Config.store_path(args.test)
    raw_dir = Config.raw_dir(args.test)
    log_file = Config.LOGS_DIR / "merge" / f"merge_{datetime.now():%Y%m%d_%H%M%S}.log"

    print("Raw Source Consolidation")
    print(f"{'=' * 60}")
    print(f"Pending: {raw_dir}")
    print(f"Store:   {store_path}")
    print(f"Log:     {log_file}")
    print()

    store = RecordStore(store_path, log_file=log_file)
    if args.init and not store.exists():
        store.create()
        print(f"✓ Created empty store {store_path}")

    merger = IngestionMerger(store, raw_dir=raw_dir, log_file=log_file)

    try:
        report = merger.consolidate()
    except MissingStoreError as e:
        print(f"✗ {e}")
        print("  Create it with headers (time,strikes,length,value) or rerun with --init.")
        return 1

    if report.is_empty:
        print(f"No CSV files found in {raw_dir}.")
        return 0

    print(f"✓ Merged {report.sources_merged} sources ({report.records_appended} records)")
    if report.has_rejections:
        print(f"✗ Rejected {len(report.sources_rejected)} sources (left in place):")
        for rejected in report.sources_rejected:
            print(f"  - {rejected.source}: {rejected.reason}")
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
