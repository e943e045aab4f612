"""Script to print the aggregate for one filter as JSON.

Usage:
    python scripts/query_rollup.py                       # Latest year, weekly buckets
    python scripts/query_rollup.py --year 2024 --month 3 # Daily buckets for March 2024
    python scripts/query_rollup.py --range 3             # Daily buckets, trailing 3 months
    python scripts/query_rollup.py --years               # List years present
"""

import argparse
import json
import sys

from roundlog.aggregation.models import FilterState
from roundlog.query import RollupQuery
from roundlog.shared.config import Config
from roundlog.shared.exceptions import MissingStoreError


def main() -> int:
    parser = argparse.ArgumentParser(description="Query rollup aggregates")
    parser.add_argument("--year", type=int, help="Year to show (default: latest present).")
    parser.add_argument("--month", type=int, help="Month within the year (1-12).")
    parser.add_argument(
        "--range",
        type=int,
        dest="trailing_range_months",
        help="Trailing range in months; overrides --year/--month.",
    )
    parser.add_argument("--years", action="store_true", help="List available years and exit.")
    parser.add_argument("--test", action="store_true", help="Query the test sandbox store.")
    args = parser.parse_args()
    Config.validate()

    service = RollupQuery.from_config(test=args.test)

    try:
        if args.years:
            print(json.dumps(service.available_years()))
            return 0

        filter_state = FilterState(
            year=args.year,
            month=args.month,
            trailing_range_months=args.trailing_range_months,
        )
        result = service.query(filter_state)
    except MissingStoreError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        parser.error(str(e))

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
