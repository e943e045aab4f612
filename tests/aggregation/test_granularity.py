"""Unit tests for granularity selection and filter validation."""

import pytest

from roundlog.aggregation.granularity import select_granularity
from roundlog.aggregation.models import FilterState, Granularity


class TestSelectGranularity:
    def test_full_year_is_weekly(self):
        assert select_granularity(FilterState(year=2024)) is Granularity.WEEK

    def test_month_is_daily(self):
        assert select_granularity(FilterState(year=2024, month=3)) is Granularity.DAY

    def test_trailing_range_is_daily(self):
        assert select_granularity(FilterState(year=2024, trailing_range_months=3)) is Granularity.DAY

    def test_range_overrides_month(self):
        state = FilterState(year=2024, month=3, trailing_range_months=12)
        assert select_granularity(state) is Granularity.DAY

    def test_default_filter_is_weekly(self):
        assert select_granularity(FilterState()) is Granularity.WEEK


class TestFilterState:
    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_rejects_invalid_month(self, month):
        with pytest.raises(ValueError, match="month must be in 1..12"):
            FilterState(year=2024, month=month)

    @pytest.mark.parametrize("months", [0, -3])
    def test_rejects_non_positive_range(self, months):
        with pytest.raises(ValueError, match="trailing_range_months must be positive"):
            FilterState(trailing_range_months=months)

    def test_is_range(self):
        assert FilterState(trailing_range_months=1).is_range
        assert not FilterState(year=2024, month=1).is_range
