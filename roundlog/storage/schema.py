"""
Record Schema
Canonical column layout and row-level validation.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

import pandas as pd


# -----------------------------
# Canonical Layout
# -----------------------------

COLUMNS: list[str] = ["time", "strikes", "length", "value"]
HEADER_LINE = ",".join(COLUMNS)

# A row whose first field equals this token is a header, wherever it appears.
HEADER_TOKEN = COLUMNS[0]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# In-memory frame layout used by the aggregation layer
FRAME_COLUMNS: list[str] = ["timestamp", "strike_count", "duration_seconds", "value"]


# -----------------------------
# Record
# -----------------------------

@dataclass(frozen=True)
class Record:
    """One practice-session event."""

    timestamp: datetime
    strike_count: int
    duration_seconds: int
    value: float

    @property
    def identity(self) -> tuple:
        return (self.timestamp, self.strike_count, self.duration_seconds, self.value)

    @classmethod
    def from_row(cls, fields: Sequence[str]) -> "Record":
        """
        Parse and validate one CSV row.

        Raises:
            ValueError: any field violates the record constraints
        """

        if len(fields) != len(COLUMNS):
            raise ValueError(
                f"Expected {len(COLUMNS)} fields, got {len(fields)}"
            )

        raw_time, raw_strikes, raw_length, raw_value = (f.strip() for f in fields)

        try:
            timestamp = datetime.strptime(raw_time, TIMESTAMP_FORMAT)
        except ValueError:
            raise ValueError(f"Invalid timestamp '{raw_time}'") from None

        strike_count = _parse_int(raw_strikes, "strikes")
        duration_seconds = _parse_int(raw_length, "length")

        try:
            value = float(raw_value)
        except ValueError:
            raise ValueError(f"Invalid value '{raw_value}'") from None

        record = cls(timestamp, strike_count, duration_seconds, value)
        record.validate()
        return record

    def validate(self) -> None:
        """
        Enforce field constraints.

        Raises:
            ValueError: negative strikes, non-positive length, bad value
        """

        if not isinstance(self.timestamp, datetime):
            raise ValueError("timestamp must be a datetime")
        if self.timestamp.microsecond:
            raise ValueError("timestamp must have second precision")
        if self.strike_count < 0:
            raise ValueError(f"strikes must be >= 0, got {self.strike_count}")
        if self.duration_seconds <= 0:
            raise ValueError(f"length must be > 0, got {self.duration_seconds}")
        if not math.isfinite(self.value) or self.value < 0:
            raise ValueError(f"value must be a finite number >= 0, got {self.value}")

    def to_row(self) -> list[str]:
        return [
            self.timestamp.strftime(TIMESTAMP_FORMAT),
            str(self.strike_count),
            str(self.duration_seconds),
            _format_value(self.value),
        ]


# -----------------------------
# Frame Conversion
# -----------------------------

def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """
    Build a frame from records, keeping their order.

    An empty input still yields the full column set with a datetime
    ``timestamp`` column so that ``.dt`` accessors work downstream.
    """

    rows = [r.identity for r in records]
    df = pd.DataFrame.from_records(rows, columns=FRAME_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    df["value"] = df["value"].astype(float)
    return df


# -----------------------------
# Internal Helpers
# -----------------------------

def is_header(fields: Sequence[str]) -> bool:
    return bool(fields) and fields[0].strip() == HEADER_TOKEN


def is_blank(fields: Sequence[str]) -> bool:
    return all(not f.strip() for f in fields)


def _parse_int(raw: str, column: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid integer for '{column}': '{raw}'") from None


def _format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
