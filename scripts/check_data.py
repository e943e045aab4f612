"""Script to validate every row of the canonical store.

Reports rows with unparseable or out-of-range timestamps (hour > 23, minute
or second > 59), negative strikes, non-positive length or invalid value.

Usage:
    python scripts/check_data.py           # Check data/data.csv
    python scripts/check_data.py --test    # Check data/test/data.csv
"""

import argparse
import sys

from roundlog.shared.config import Config
from roundlog.shared.exceptions import MissingStoreError
from roundlog.storage.record_store import RecordStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate the canonical record store")
    parser.add_argument(
        "--test",
        action="store_true",
        help="Check the test sandbox store (data/test/data.csv).",
    )
    args = parser.parse_args()
    Config.validate()

    store = RecordStore(Config.store_path(args.test))

    try:
        issues = store.check()
    except MissingStoreError as e:
        print(f"✗ {e}")
        return 1

    for issue in issues:
        print(f"Invalid row at line {issue.line_number}: {issue.line} ({issue.reason})")

    if issues:
        print(f"✗ {len(issues)} invalid rows in {store.path}")
        return 1

    print(f"✓ {store.path} is valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
