"""Unit tests for RawBatch parsing."""

import pytest

from roundlog.ingestion.raw_batch import RawBatch
from roundlog.shared.exceptions import MalformedRecordError


class TestReadRows:
    def test_skips_header_and_blank_lines(self, write_raw):
        path = write_raw(
            "2024-01-01.csv",
            ["2024-01-01 03:00:00,0,360,12", "", "2024-01-01 03:06:00,1,340,15"],
        )

        rows = RawBatch(path).read_rows()

        assert [index for index, _ in rows] == [2, 4]
        assert [r.value for _, r in rows] == [12.0, 15.0]

    def test_headerless_file(self, write_raw):
        path = write_raw("2024-01-01.csv", ["2024-01-01 03:00:00,0,360,12"], header=False)

        rows = RawBatch(path).read_rows()

        assert len(rows) == 1
        assert rows[0][0] == 1

    def test_header_only_file_is_empty(self, write_raw):
        path = write_raw("2024-01-01.csv", [])
        assert RawBatch(path).read_rows() == []

    def test_invalid_row_reports_source_and_row(self, write_raw):
        path = write_raw(
            "2024-01-01.csv",
            ["2024-01-01 03:00:00,0,360,12", "2024-01-01 03:06:00,-1,340,15"],
        )

        with pytest.raises(MalformedRecordError) as exc_info:
            RawBatch(path).read_rows()

        assert exc_info.value.source == str(path)
        assert exc_info.value.row_index == 3
        assert "strikes must be >= 0" in str(exc_info.value)

    def test_non_utf8_file_is_malformed(self, raw_dir):
        path = raw_dir / "bad.csv"
        path.write_bytes(b"time,strikes,length,value\n\xff\xfe,0,1,2\n")

        with pytest.raises(MalformedRecordError, match="Not valid UTF-8"):
            RawBatch(path).read_rows()

    def test_consume_removes_file(self, write_raw):
        path = write_raw("2024-01-01.csv", [])
        batch = RawBatch(path)

        batch.consume()

        assert not path.exists()
        assert batch.name == "2024-01-01.csv"

    def test_missing_file_is_malformed(self, raw_dir):
        with pytest.raises(MalformedRecordError, match="Cannot read source"):
            RawBatch(raw_dir / "gone.csv").read_rows()

    def test_directory_is_malformed(self, raw_dir):
        path = raw_dir / "a.csv"
        path.mkdir()

        with pytest.raises(MalformedRecordError, match="Cannot read source") as exc_info:
            RawBatch(path).read_rows()

        assert exc_info.value.source == str(path)
