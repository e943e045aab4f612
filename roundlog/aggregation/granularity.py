"""Bucket width selection from the active filter."""

from roundlog.aggregation.models import FilterState, Granularity


def select_granularity(filter_state: FilterState) -> Granularity:
    """
    Choose DAY or WEEK buckets for a filter.

    - trailing range set -> DAY (range views never roll up by week)
    - month set          -> DAY
    - full year          -> WEEK

    The hourly profile is computed independently of this choice.
    """

    if filter_state.is_range:
        return Granularity.DAY
    if filter_state.month is not None:
        return Granularity.DAY
    return Granularity.WEEK
