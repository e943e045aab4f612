"""Granularity selection and rollup aggregation."""

from roundlog.aggregation.engine import aggregate, bucketize, build_predicate, hourly_profile
from roundlog.aggregation.granularity import select_granularity
from roundlog.aggregation.models import (
    HOURS_PER_DAY,
    AggregateResult,
    Bucket,
    FilterState,
    Granularity,
)

__all__ = [
    "HOURS_PER_DAY",
    "AggregateResult",
    "Bucket",
    "FilterState",
    "Granularity",
    "aggregate",
    "bucketize",
    "build_predicate",
    "hourly_profile",
    "select_granularity",
]
