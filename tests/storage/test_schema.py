"""Unit tests for record parsing and validation."""

from datetime import datetime

import pandas as pd
import pytest

from roundlog.storage.schema import (
    FRAME_COLUMNS,
    HEADER_LINE,
    Record,
    is_blank,
    is_header,
    records_to_frame,
)


class TestRecordFromRow:
    def test_parses_valid_row(self):
        record = Record.from_row(["2024-01-01 03:00:00", "0", "360", "12"])

        assert record.timestamp == datetime(2024, 1, 1, 3, 0, 0)
        assert record.strike_count == 0
        assert record.duration_seconds == 360
        assert record.value == 12.0

    def test_strips_whitespace(self):
        record = Record.from_row([" 2024-01-01 03:00:00 ", " 1", "340 ", " 13.5 "])

        assert record.strike_count == 1
        assert record.value == 13.5

    @pytest.mark.parametrize(
        "fields, message",
        [
            (["2024-13-01 03:00:00", "0", "360", "12"], "Invalid timestamp"),
            (["2024-01-01 24:00:00", "0", "360", "12"], "Invalid timestamp"),
            (["2024-01-01 03:61:00", "0", "360", "12"], "Invalid timestamp"),
            (["2024-01-01", "0", "360", "12"], "Invalid timestamp"),
            (["2024-01-01 03:00:00", "-1", "360", "12"], "strikes must be >= 0"),
            (["2024-01-01 03:00:00", "0", "0", "12"], "length must be > 0"),
            (["2024-01-01 03:00:00", "0", "-5", "12"], "length must be > 0"),
            (["2024-01-01 03:00:00", "0", "360", "-1"], "value must be"),
            (["2024-01-01 03:00:00", "0", "360", "nan"], "value must be"),
            (["2024-01-01 03:00:00", "x", "360", "12"], "Invalid integer for 'strikes'"),
            (["2024-01-01 03:00:00", "0", "3.5", "12"], "Invalid integer for 'length'"),
            (["2024-01-01 03:00:00", "0", "360", "abc"], "Invalid value"),
            (["2024-01-01 03:00:00", "0", "360"], "Expected 4 fields"),
        ],
    )
    def test_rejects_invalid_rows(self, fields, message):
        with pytest.raises(ValueError, match=message):
            Record.from_row(fields)


class TestRecordToRow:
    def test_integral_value_written_without_decimal(self):
        record = Record(datetime(2024, 1, 1, 3, 0, 0), 0, 360, 12.0)
        assert record.to_row() == ["2024-01-01 03:00:00", "0", "360", "12"]

    def test_fractional_value_preserved(self):
        record = Record(datetime(2024, 1, 1, 3, 0, 0), 2, 330, 12.25)
        assert record.to_row()[3] == "12.25"

    def test_row_parses_back_to_equal_record(self):
        record = Record(datetime(2024, 5, 6, 7, 8, 9), 1, 345, 13.0)
        assert Record.from_row(record.to_row()) == record


class TestRowHelpers:
    def test_header_detected_by_first_field(self):
        assert is_header(HEADER_LINE.split(","))
        assert is_header(["time", "strikes", "length", "cost"])
        assert not is_header(["2024-01-01 03:00:00", "0", "360", "12"])

    def test_blank_rows(self):
        assert is_blank([])
        assert is_blank(["", " "])
        assert not is_blank(["2024-01-01 03:00:00"])


class TestRecordsToFrame:
    def test_empty_frame_has_datetime_column(self):
        df = records_to_frame([])

        assert list(df.columns) == FRAME_COLUMNS
        assert df.empty
        assert pd.api.types.is_datetime64_any_dtype(df["timestamp"])

    def test_preserves_order_and_types(self):
        records = [
            Record(datetime(2024, 1, 2, 3, 0, 0), 0, 360, 12.0),
            Record(datetime(2024, 1, 1, 3, 0, 0), 1, 340, 13.0),
        ]

        df = records_to_frame(records)

        assert df["timestamp"].iloc[0] == pd.Timestamp("2024-01-02 03:00:00")
        assert df["value"].dtype == float
        assert df["strike_count"].tolist() == [0, 1]
