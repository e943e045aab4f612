"""
Rollup Aggregation
Filtered records -> ordered day/week buckets plus a 24-hour profile.

Week keys use a simplified numbering: week 1 starts on January 1st and every
week is a 7-day span from there (``week = (day_of_year - 1) // 7 + 1``), so
December 30/31 fall into week 53. Weeks are not reconciled across the year
boundary and do not follow ISO-8601.
"""

from typing import Iterable

import pandas as pd

from roundlog.aggregation.granularity import select_granularity
from roundlog.aggregation.models import (
    HOURS_PER_DAY,
    AggregateResult,
    Bucket,
    FilterState,
    Granularity,
)
from roundlog.storage.schema import Record, records_to_frame


# -----------------------------
# Entry Point
# -----------------------------

def aggregate(
    records: Iterable[Record] | pd.DataFrame,
    filter_state: FilterState,
) -> AggregateResult:
    """
    Aggregate records for one filter.

    Accepts either records or a frame shaped like ``records_to_frame`` output.
    Never raises for data reasons: a filter matching nothing yields no buckets
    and an all-zero hourly profile.
    """

    granularity = select_granularity(filter_state)

    df = records if isinstance(records, pd.DataFrame) else records_to_frame(records)
    if df.empty:
        return AggregateResult.empty(granularity)

    # Stable sort keeps ingestion order on equal timestamps
    df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)

    matched = df[build_predicate(df, filter_state)]
    if matched.empty:
        return AggregateResult.empty(granularity)

    return AggregateResult(
        granularity=granularity,
        buckets=bucketize(matched, granularity),
        hourly_profile=hourly_profile(matched),
    )


# -----------------------------
# Filtering
# -----------------------------

def build_predicate(df: pd.DataFrame, filter_state: FilterState) -> pd.Series:
    """
    Boolean mask of rows matching the filter.

    Range mode keeps rows at or after (latest timestamp - N calendar months);
    month arithmetic clips to month end (Mar 31 - 1 month = Feb 28/29).
    Otherwise the year (default: latest present) and optional month must match.
    """

    ts = df["timestamp"]
    if ts.empty:
        return pd.Series(False, index=df.index)

    if filter_state.is_range:
        cutoff = ts.max() - pd.DateOffset(months=filter_state.trailing_range_months)
        return ts >= cutoff

    year = resolve_year(df, filter_state)
    mask = ts.dt.year == year
    if filter_state.month is not None:
        mask &= ts.dt.month == filter_state.month
    return mask


def resolve_year(df: pd.DataFrame, filter_state: FilterState) -> int | None:
    """Filter year, falling back to the latest year present."""

    if filter_state.year is not None:
        return filter_state.year
    if df.empty:
        return None
    return int(df["timestamp"].max().year)


# -----------------------------
# Bucketing
# -----------------------------

def week_number(ts: pd.Series) -> pd.Series:
    return (ts.dt.dayofyear - 1) // 7 + 1


def bucket_keys(ts: pd.Series, granularity: Granularity) -> pd.Series:
    if granularity is Granularity.DAY:
        return ts.dt.strftime("%Y-%m-%d")
    if granularity is Granularity.WEEK:
        weeks = week_number(ts)
        return ts.dt.year.astype(str) + "-W" + weeks.astype(str).str.zfill(2)
    return ts.dt.hour


def bucketize(matched: pd.DataFrame, granularity: Granularity) -> list[Bucket]:
    """
    Group already-filtered rows into buckets sorted by key.

    Day and week buckets exist only for keys present in ``matched``; hour
    buckets are zero-filled across the whole day. Hour buckets fold every
    matched day together, so their ``year`` is the year of the latest matched
    record (the filter year outside range mode).
    """

    if granularity is Granularity.HOUR:
        return _hour_buckets(matched)

    ts = matched["timestamp"]
    frame = pd.DataFrame(
        {
            "key": bucket_keys(ts, granularity),
            "year": ts.dt.year,
            "month": ts.dt.month,
            "value": matched["value"].astype(float),
        }
    )

    group_cols = ["key", "year", "month"] if granularity is Granularity.DAY else ["key", "year"]
    grouped = (
        frame.groupby(group_cols, sort=True)["value"]
        .agg(records="count", total="sum")
        .reset_index()
        .sort_values("key", kind="stable")
    )

    return [
        Bucket(
            key=row.key,
            year=int(row.year),
            month=int(row.month) if granularity is Granularity.DAY else None,
            count=int(row.records),
            total_value=float(row.total),
        )
        for row in grouped.itertuples(index=False)
    ]


def hourly_profile(matched: pd.DataFrame) -> list[int]:
    """Record counts per hour of day, always 24 entries."""

    if matched.empty:
        return [0] * HOURS_PER_DAY

    counts = (
        matched["timestamp"].dt.hour
        .value_counts()
        .reindex(range(HOURS_PER_DAY), fill_value=0)
    )
    return [int(c) for c in counts]


def _hour_buckets(matched: pd.DataFrame) -> list[Bucket]:
    if matched.empty:
        return []

    year = int(matched["timestamp"].max().year)
    hours = matched["timestamp"].dt.hour
    values = matched["value"].astype(float)

    buckets = []
    for hour in range(HOURS_PER_DAY):
        in_hour = hours == hour
        buckets.append(
            Bucket(
                key=hour,
                year=year,
                month=None,
                count=int(in_hour.sum()),
                total_value=float(values[in_hour].sum()),
            )
        )
    return buckets
