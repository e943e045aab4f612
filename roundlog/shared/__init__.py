"""Shared utilities and configuration."""

from roundlog.shared.config import Config
from roundlog.shared.exceptions import (
    DuplicateRecordError,
    MalformedRecordError,
    MissingStoreError,
    RoundlogError,
    StoreLockTimeout,
)
from roundlog.shared.utils import setup_logger

__all__ = [
    "Config",
    "setup_logger",
    "RoundlogError",
    "MalformedRecordError",
    "DuplicateRecordError",
    "MissingStoreError",
    "StoreLockTimeout",
]
