"""Append-only CSV record store.

The canonical store is a single growing CSV file::

    time,strikes,length,value
    2024-01-01 03:00:00,0,360,12
    2024-01-01 06:10:00,1,340,13
    <blank separator after every appended batch>

Blank lines and repeated header lines are tolerated as noise. Existing lines
are never rewritten; ``append`` only ever adds to the end of the file and
truncates back to the previous size if the write fails part-way.
"""

import csv
import io
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

import pandas as pd

from roundlog.shared.config import Config
from roundlog.shared.exceptions import MalformedRecordError, MissingStoreError
from roundlog.shared.utils import setup_logger
from roundlog.storage.locking import StoreLock
from roundlog.storage.schema import (
    HEADER_LINE,
    Record,
    is_blank,
    is_header,
    records_to_frame,
)


@dataclass(frozen=True)
class StoreIssue:
    """A canonical-store line that fails validation."""

    line_number: int
    line: str
    reason: str


class RecordStore:
    """Durable, ordered, append-only collection of records."""

    def __init__(
        self,
        path: Path,
        lock_timeout: float | None = None,
        log_file: Path | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: Canonical CSV file.
            lock_timeout: Seconds to wait for the store lock (default: Config.LOCK_TIMEOUT).
            log_file: Optional path for file-based logging.
        """
        self.path = Path(path)
        self.lock_path = self.path.with_name(f".{self.path.name}.lock")
        self.lock_timeout = lock_timeout if lock_timeout is not None else Config.LOCK_TIMEOUT
        self.logger = setup_logger(self.__class__.__name__, log_file, Config.LOG_LEVEL)
        self._exclusive_held = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        return self.path.is_file()

    def create(self) -> None:
        """Initialise an empty store holding only the header line.

        Raises:
            FileExistsError: If the store already exists.
        """
        if self.exists():
            raise FileExistsError(f"Store already exists: {self.path}")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.exclusive():
            self.path.write_text(HEADER_LINE + "\n", encoding="utf-8")
        self.logger.info("Created empty store at %s", self.path)

    def ensure_readable(self) -> None:
        """Raise MissingStoreError unless the store is a readable file."""
        if not self.exists():
            raise MissingStoreError(self.path)
        if not os.access(self.path, os.R_OK):
            raise MissingStoreError(self.path, "not readable")

    def ensure_writable(self) -> None:
        """Raise MissingStoreError unless the store can be read and appended to."""
        self.ensure_readable()
        if not os.access(self.path, os.W_OK):
            raise MissingStoreError(self.path, "not writable")

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the exclusive store lock; re-entrant for this instance."""
        if self._exclusive_held:
            yield
            return

        with StoreLock(self.lock_path, exclusive=True, timeout=self.lock_timeout):
            self._exclusive_held = True
            try:
                yield
            finally:
                self._exclusive_held = False

    @contextmanager
    def _shared(self) -> Iterator[None]:
        if self._exclusive_held:
            yield
            return

        with StoreLock(self.lock_path, exclusive=False, timeout=self.lock_timeout):
            yield

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def append(self, records: Sequence[Record]) -> int:
        """Append records at the end of the store, all or nothing.

        Args:
            records: Records in the order they should be stored.

        Returns:
            Number of records written.

        Raises:
            MalformedRecordError: If any record violates the field constraints.
                Nothing is written in that case.
            MissingStoreError: If the store file does not exist or is read-only.
        """
        records = list(records)
        for index, record in enumerate(records, start=1):
            try:
                record.validate()
            except ValueError as exc:
                raise MalformedRecordError(str(exc), source=self.path, row_index=index) from exc

        if not records:
            return 0

        self.ensure_writable()

        payload = io.StringIO()
        writer = csv.writer(payload, lineterminator="\n")
        writer.writerows(r.to_row() for r in records)
        # Blank separator between batches
        payload.write("\n")

        with self.exclusive():
            self._write_payload(payload.getvalue())

        self.logger.debug("Appended %d records to %s", len(records), self.path)
        return len(records)

    def _write_payload(self, text: str) -> None:
        original_size = self.path.stat().st_size
        if original_size and not self._ends_with_newline():
            text = "\n" + text

        try:
            with open(self.path, "a", encoding="utf-8", newline="") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
        except OSError:
            self.logger.error("Append to %s failed, truncating to %d bytes", self.path, original_size)
            os.truncate(self.path, original_size)
            raise

    def _ends_with_newline(self) -> bool:
        with open(self.path, "rb") as f:
            f.seek(-1, os.SEEK_END)
            return f.read(1) == b"\n"

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def scan(self) -> Iterator[Record]:
        """Iterate records ordered by timestamp, ties in file order.

        The file is read once under a shared lock; each call starts a fresh
        snapshot, so scans are restartable and never see a half-written batch.

        Raises:
            MissingStoreError: If the store file does not exist.
        """
        text = self._snapshot()
        return self._iter_sorted(text)

    def load_frame(self) -> pd.DataFrame:
        """Scanned records as a DataFrame sorted by timestamp."""
        return records_to_frame(self.scan())

    def check(self) -> list[StoreIssue]:
        """Validate every line of the store without raising.

        Returns:
            One StoreIssue per invalid line, in file order.
        """
        text = self._snapshot()
        issues: list[StoreIssue] = []

        lines = text.splitlines()
        first_content = next((i for i, line in enumerate(lines) if line.strip()), None)
        if first_content is not None:
            fields = next(csv.reader([lines[first_content]]))
            if not is_header(fields):
                issues.append(StoreIssue(first_content + 1, lines[first_content], "missing header line"))

        for line_number, fields, line in self._iter_rows(text):
            try:
                Record.from_row(fields)
            except ValueError as exc:
                issues.append(StoreIssue(line_number, line, str(exc)))

        return issues

    def _snapshot(self) -> str:
        self.ensure_readable()
        with self._shared():
            return self.path.read_text(encoding="utf-8")

    def _iter_sorted(self, text: str) -> Iterator[Record]:
        records: list[Record] = []
        for line_number, fields, _ in self._iter_rows(text):
            try:
                records.append(Record.from_row(fields))
            except ValueError as exc:
                self.logger.warning("Skipping invalid store line %d: %s", line_number, exc)

        # sorted() is stable, so equal timestamps keep ingestion order
        yield from sorted(records, key=lambda r: r.timestamp)

    @staticmethod
    def _iter_rows(text: str) -> Iterator[tuple[int, list[str], str]]:
        """Yield (line_number, fields, raw_line) for data rows only."""
        for line_number, line in enumerate(text.splitlines(), start=1):
            fields = next(csv.reader([line]), [])
            if is_blank(fields) or is_header(fields):
                continue
            yield line_number, fields, line
