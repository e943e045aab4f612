"""Raw source files awaiting consolidation.

A raw source is one exported CSV (typically one calendar day) sitting in the
pending directory. Each file carries its own header, detected by its first
field rather than by position.
"""

import csv
from dataclasses import dataclass
from pathlib import Path

from roundlog.shared.exceptions import MalformedRecordError
from roundlog.storage.schema import Record, is_blank, is_header


@dataclass(frozen=True)
class RawBatch:
    """One pending raw source."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def read_rows(self) -> list[tuple[int, Record]]:
        """Parse every data row of the file.

        Header rows and blank lines are skipped wherever they appear.

        Returns:
            (row_index, record) pairs in file order; row_index is the 1-based
            line number in the file.

        Raises:
            MalformedRecordError: On the first row that fails validation, if
                the file is not valid UTF-8, or if it cannot be opened.
        """
        rows: list[tuple[int, Record]] = []

        try:
            with open(self.path, newline="", encoding="utf-8") as f:
                for row_index, fields in enumerate(csv.reader(f), start=1):
                    if is_blank(fields) or is_header(fields):
                        continue
                    try:
                        rows.append((row_index, Record.from_row(fields)))
                    except ValueError as exc:
                        raise MalformedRecordError(
                            str(exc), source=self.path, row_index=row_index
                        ) from exc
        except UnicodeDecodeError as exc:
            raise MalformedRecordError(f"Not valid UTF-8: {exc}", source=self.path) from exc
        except OSError as exc:
            raise MalformedRecordError(f"Cannot read source: {exc}", source=self.path) from exc

        return rows

    def consume(self) -> None:
        """Remove the source from the pending pool."""
        self.path.unlink()
