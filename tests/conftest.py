"""
Root pytest configuration.

Shared fixtures for a temporary canonical store and raw-source directory.
"""

from pathlib import Path

import pytest

from roundlog.storage.record_store import RecordStore
from roundlog.storage.schema import HEADER_LINE


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Canonical store holding only its header line."""
    path = tmp_path / "data.csv"
    path.write_text(HEADER_LINE + "\n", encoding="utf-8")
    return path


@pytest.fixture
def store(store_path: Path) -> RecordStore:
    return RecordStore(store_path, lock_timeout=0.2)


@pytest.fixture
def raw_dir(tmp_path: Path) -> Path:
    path = tmp_path / "raw"
    path.mkdir()
    return path


@pytest.fixture
def write_raw(raw_dir: Path):
    """Write a raw export; rows are joined under the standard header."""

    def _write(name: str, rows: list[str], header: bool = True) -> Path:
        lines = ([HEADER_LINE] if header else []) + rows
        path = raw_dir / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
