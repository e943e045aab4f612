"""Canonical record store, record schema and store locking."""

from roundlog.storage.locking import StoreLock
from roundlog.storage.record_store import RecordStore, StoreIssue
from roundlog.storage.schema import (
    COLUMNS,
    HEADER_LINE,
    TIMESTAMP_FORMAT,
    Record,
    records_to_frame,
)

__all__ = [
    "COLUMNS",
    "HEADER_LINE",
    "TIMESTAMP_FORMAT",
    "Record",
    "RecordStore",
    "StoreIssue",
    "StoreLock",
    "records_to_frame",
]
