"""Query façade: the single entry point for the presentation layer.

Every call re-scans the store and re-aggregates; nothing is cached between
calls, so the result always reflects the latest completed consolidation.
"""

from pathlib import Path

from roundlog.aggregation.engine import aggregate
from roundlog.aggregation.models import AggregateResult, FilterState
from roundlog.shared.config import Config
from roundlog.shared.utils import setup_logger
from roundlog.storage.record_store import RecordStore


class RollupQuery:
    """Read-only aggregate queries over a RecordStore."""

    def __init__(self, store: RecordStore, log_file: Path | None = None) -> None:
        self.store = store
        self.logger = setup_logger(self.__class__.__name__, log_file, Config.LOG_LEVEL)

    @classmethod
    def from_config(cls, test: bool = False) -> "RollupQuery":
        """Query the configured canonical store (or the test sandbox)."""
        return cls(RecordStore(Config.store_path(test)))

    def query(self, filter_state: FilterState | None = None) -> AggregateResult:
        """Aggregate the whole store for one filter.

        Args:
            filter_state: Slice to aggregate (default: latest year, weekly).

        Returns:
            AggregateResult with ordered buckets and a 24-entry hourly profile.

        Raises:
            MissingStoreError: If the store file does not exist.
        """
        filter_state = filter_state or FilterState()
        df = self.store.load_frame()
        result = aggregate(df, filter_state)
        self.logger.debug(
            "Query %s -> %d %s buckets, %d records",
            filter_state,
            len(result.buckets),
            result.granularity.value,
            result.total_count,
        )
        return result

    def available_years(self) -> list[int]:
        """Distinct years present in the store, newest first."""
        df = self.store.load_frame()
        if df.empty:
            return []
        years = df["timestamp"].dt.year.unique()
        return sorted((int(y) for y in years), reverse=True)
