"""Exception hierarchy for ingestion and storage failures."""

from pathlib import Path


class RoundlogError(Exception):
    """Base class for all roundlog errors."""


class MalformedRecordError(RoundlogError):
    """A row failed field validation.

    Carries the offending source (file path or label) and the 1-based row
    index inside it, when known.
    """

    def __init__(
        self,
        reason: str,
        source: str | Path | None = None,
        row_index: int | None = None,
    ) -> None:
        self.reason = reason
        self.source = str(source) if source is not None else None
        self.row_index = row_index
        location = ""
        if self.source is not None:
            location = f"{self.source}"
            if row_index is not None:
                location += f":{row_index}"
            location += ": "
        super().__init__(f"{location}{reason}")


class DuplicateRecordError(MalformedRecordError):
    """A source repeats a record already present in the store or in itself."""


class MissingStoreError(RoundlogError):
    """The canonical store is absent or unreadable."""

    def __init__(self, path: str | Path, detail: str | None = None) -> None:
        self.path = Path(path)
        message = f"Canonical store not found: {self.path}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class StoreLockTimeout(RoundlogError):
    """The store lock could not be acquired before the timeout."""
