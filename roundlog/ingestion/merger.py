"""Ingestion merger: folds pending raw sources into the canonical store.

Merge policy, per source and in the order given:

1. Parse all rows, skipping header rows detected per file and blank lines.
2. Reject the whole source on the first invalid row.
3. Reject the whole source if a row repeats another row of the same source or
   a record already in the store.
4. Append the records in file order.
5. Delete the source file only after the append succeeded.

Rejected sources stay in the pending directory for manual correction. The
store's exclusive lock is held for the entire batch, so concurrent readers see
the store either before or after the consolidation.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from roundlog.ingestion.raw_batch import RawBatch
from roundlog.shared.config import Config
from roundlog.shared.exceptions import DuplicateRecordError, MalformedRecordError
from roundlog.shared.utils import setup_logger
from roundlog.storage.record_store import RecordStore
from roundlog.storage.schema import Record


@dataclass(frozen=True)
class RejectedSource:
    source: str
    reason: str


@dataclass
class ConsolidationReport:
    """Outcome of one consolidate() call."""

    sources_merged: int = 0
    records_appended: int = 0
    sources_rejected: list[RejectedSource] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when there was nothing pending (zero-work success)."""
        return self.sources_merged == 0 and not self.sources_rejected

    @property
    def has_rejections(self) -> bool:
        return bool(self.sources_rejected)

    def to_dict(self) -> dict:
        return {
            "sources_merged": self.sources_merged,
            "records_appended": self.records_appended,
            "sources_rejected": [
                {"source": r.source, "reason": r.reason} for r in self.sources_rejected
            ],
        }


class IngestionMerger:
    """Consolidates pending raw CSV exports into a RecordStore."""

    def __init__(
        self,
        store: RecordStore,
        raw_dir: Path | None = None,
        log_file: Path | None = None,
    ) -> None:
        """Initialize the merger.

        Args:
            store: Canonical store to append to.
            raw_dir: Pending pool directory (default: Config.raw_dir()).
            log_file: Optional path for file-based logging.
        """
        self.store = store
        self.raw_dir = raw_dir or Config.raw_dir()
        self.logger = setup_logger(self.__class__.__name__, log_file, Config.LOG_LEVEL)

    def pending_sources(self) -> list[RawBatch]:
        """List pending raw sources in file-name order."""
        if not self.raw_dir.exists():
            self.logger.warning("Raw directory not found: %s", self.raw_dir)
            return []
        return [RawBatch(path) for path in sorted(self.raw_dir.glob("*.csv")) if path.is_file()]

    def consolidate(self, raw_sources: Sequence[RawBatch] | None = None) -> ConsolidationReport:
        """Merge raw sources into the store.

        Args:
            raw_sources: Sources to merge, in order (default: the pending pool).

        Returns:
            ConsolidationReport with merged/rejected counts.

        Raises:
            MissingStoreError: If the store is absent or read-only; raised
                before any change.
        """
        self.store.ensure_writable()

        # Repeated entries name the same file; merge it once
        sources = self.pending_sources() if raw_sources is None else list(dict.fromkeys(raw_sources))
        report = ConsolidationReport()

        if not sources:
            self.logger.info("No CSV files found in %s", self.raw_dir)
            return report

        self.logger.info("Found %d raw sources to consolidate", len(sources))

        with self.store.exclusive():
            known = {record.identity for record in self.store.scan()}

            for batch in sources:
                try:
                    records = self._validated_records(batch, known)
                    appended = self.store.append(records)
                except MalformedRecordError as exc:
                    self.logger.warning("Rejected %s: %s", batch.name, exc)
                    report.sources_rejected.append(RejectedSource(batch.name, str(exc)))
                    continue

                known.update(record.identity for record in records)
                report.sources_merged += 1
                report.records_appended += appended
                self.logger.info("Merged %d records from %s", appended, batch.name)

                try:
                    batch.consume()
                except OSError as exc:
                    self.logger.error("Merged %s but could not remove it: %s", batch.name, exc)
                    report.sources_rejected.append(
                        RejectedSource(batch.name, f"Appended but not consumed: {exc}")
                    )

        self.logger.info(
            "Consolidation finished: %d merged, %d rejected, %d records appended",
            report.sources_merged,
            len(report.sources_rejected),
            report.records_appended,
        )
        return report

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _validated_records(self, batch: RawBatch, known: set[tuple]) -> list[Record]:
        rows = batch.read_rows()

        seen: set[tuple] = set()
        for row_index, record in rows:
            if record.identity in known:
                raise DuplicateRecordError(
                    "Record already present in store", source=batch.path, row_index=row_index
                )
            if record.identity in seen:
                raise DuplicateRecordError(
                    "Record repeated within source", source=batch.path, row_index=row_index
                )
            seen.add(record.identity)

        return [record for _, record in rows]
