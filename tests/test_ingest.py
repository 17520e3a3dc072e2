"""
ZipDB Ingest and Report Tests
=============================
CSV loading (header skip, bad-row tolerance, empty coordinates), the
in-memory RecordBuffer, and the state boundary report.
"""

import logging
import os
import shutil
import tempfile

import pytest

from ingest.buffer import RecordBuffer
from ingest.csv_loader import load_csv, parse_row
from reports.boundaries import (
    REPORT_HEADER, compute_state_boundaries, format_boundaries, write_boundaries,
)
from storage.errors import MalformedRecord, SourceUnreadable
from storage.record import ZipCodeRecord

CSV_HEADER = "Zip Code,Place Name,State,County,Lat,Long\n"


# ═══════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def tmp_dir():
    path = tempfile.mkdtemp(prefix="zipdb_ingest_")
    yield path
    shutil.rmtree(path, ignore_errors=True)


def _write_csv(tmp_dir, body: str, name: str = "zips.csv") -> str:
    path = os.path.join(tmp_dir, name)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(CSV_HEADER + body)
    return path


# ═══════════════════════════════════════════════════════════════════════════
# 1. Row parsing
# ═══════════════════════════════════════════════════════════════════════════

class TestParseRow:

    def test_valid(self):
        rec = parse_row(["00601", "Adjuntas", "PR", "Adjuntas", "18.18", "-66.75"])
        assert rec == ZipCodeRecord("00601", "Adjuntas", "PR", "Adjuntas", 18.18, -66.75)

    def test_strips_whitespace(self):
        rec = parse_row([" 00601 ", "Adjuntas ", "PR", "Adjuntas", " 18.18", "-66.75 "])
        assert rec.zip_code == "00601"
        assert rec.place_name == "Adjuntas"

    def test_empty_coordinates_become_zero(self):
        rec = parse_row(["96799", "Pago Pago", "AS", "Eastern", "", ""])
        assert (rec.latitude, rec.longitude) == (0.0, 0.0)

    def test_wrong_field_count(self):
        with pytest.raises(MalformedRecord):
            parse_row(["00601", "Adjuntas", "PR"])

    def test_non_numeric_coordinate(self):
        with pytest.raises(MalformedRecord):
            parse_row(["00601", "Adjuntas", "PR", "Adjuntas", "abc", "-66.75"])

    def test_empty_zip(self):
        with pytest.raises(MalformedRecord):
            parse_row(["", "Adjuntas", "PR", "Adjuntas", "1", "2"])

    def test_separator_inside_quoted_field(self):
        with pytest.raises(MalformedRecord):
            parse_row(["20001", "Washington, DC", "DC", "DC", "38.9", "-77.0"])


# ═══════════════════════════════════════════════════════════════════════════
# 2. Bulk load
# ═══════════════════════════════════════════════════════════════════════════

class TestLoadCsv:

    def test_skips_header(self, tmp_dir):
        path = _write_csv(tmp_dir, "00601,Adjuntas,PR,Adjuntas,18.18,-66.75\n")
        assert load_csv(path) == [
            ZipCodeRecord("00601", "Adjuntas", "PR", "Adjuntas", 18.18, -66.75)]

    def test_bad_row_is_skipped(self, tmp_dir, caplog):
        path = _write_csv(tmp_dir, (
            "00601,Adjuntas,PR,Adjuntas,18.18,-66.75\n"
            "10001,New York,NY,New York,40.75,-73.99\n"
            "12345,Bad,NY,Kings,not-a-number,-73.9\n"
            "99501,Anchorage,AK,Anchorage,61.22,-149.88\n"
        ))
        with caplog.at_level(logging.WARNING, logger="zipdb.ingest"):
            records = load_csv(path)
        assert [r.zip_code for r in records] == ["00601", "10001", "99501"]
        assert any("skipping row" in m for m in caplog.messages)

    def test_blank_lines_ignored(self, tmp_dir):
        path = _write_csv(tmp_dir, "\n00601,Adjuntas,PR,Adjuntas,18.18,-66.75\n\n")
        assert len(load_csv(path)) == 1

    def test_header_only(self, tmp_dir):
        assert load_csv(_write_csv(tmp_dir, "")) == []

    def test_missing_file(self, tmp_dir):
        with pytest.raises(SourceUnreadable):
            load_csv(os.path.join(tmp_dir, "nope.csv"))


# ═══════════════════════════════════════════════════════════════════════════
# 3. RecordBuffer
# ═══════════════════════════════════════════════════════════════════════════

class TestRecordBuffer:

    def test_load_csv_and_get_by_zip(self, tmp_dir):
        path = _write_csv(tmp_dir, (
            "12345,First,NY,Schenectady,42.81,-73.94\n"
            "12345,Second,NY,Schenectady,42.82,-73.95\n"
        ))
        buf = RecordBuffer()
        assert buf.load_csv(path) == 2
        assert buf.get_by_zip("12345").place_name == "First"
        assert buf.get_by_zip("00000") is None

    def test_store_roundtrip(self, tmp_dir):
        records = [
            ZipCodeRecord("00601", "Adjuntas", "PR", "Adjuntas", 18.18, -66.75),
            ZipCodeRecord("99501", "Anchorage", "AK", "Anchorage", 61.22, -149.88),
        ]
        store = os.path.join(tmp_dir, "zips.dat")
        header = RecordBuffer(records).write_store(store)
        assert header.record_count == 2

        reloaded = RecordBuffer()
        assert reloaded.load_store(store) == 2
        assert reloaded.records == records
        assert len(reloaded) == 2
        assert list(reloaded) == records

    def test_by_state(self):
        buf = RecordBuffer([
            ZipCodeRecord("1", "a", "NY", "c", 1.0, 1.0),
            ZipCodeRecord("2", "b", "PR", "c", 1.0, 1.0),
            ZipCodeRecord("3", "c", "NY", "c", 1.0, 1.0),
        ])
        groups = buf.by_state()
        assert list(groups) == ["NY", "PR"]
        assert [r.zip_code for r in groups["NY"]] == ["1", "3"]


# ═══════════════════════════════════════════════════════════════════════════
# 4. State boundaries
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def ny_records():
    return [
        ZipCodeRecord("10001", "New York", "NY", "New York", 40.75, -73.99),
        ZipCodeRecord("14701", "Jamestown", "NY", "Chautauqua", 42.09, -79.24),
        ZipCodeRecord("11954", "Montauk", "NY", "Suffolk", 41.04, -71.95),
        ZipCodeRecord("12979", "Rouses Point", "NY", "Clinton", 44.99, -73.37),
        ZipCodeRecord("10307", "Staten Island", "NY", "Richmond", 40.51, -74.24),
    ]


class TestBoundaries:

    def test_extremes(self, ny_records):
        b = compute_state_boundaries(ny_records)["NY"]
        assert b.easternmost.zip_code == "11954"
        assert b.westernmost.zip_code == "14701"
        assert b.northernmost.zip_code == "12979"
        assert b.southernmost.zip_code == "10307"

    def test_states_sorted(self, ny_records):
        records = ny_records + [ZipCodeRecord("00601", "Adjuntas", "PR", "Adjuntas", 18.18, -66.75),
                                ZipCodeRecord("99501", "Anchorage", "AK", "Anchorage", 61.22, -149.88)]
        assert list(compute_state_boundaries(records)) == ["AK", "NY", "PR"]

    def test_single_record_state(self):
        rec = ZipCodeRecord("00601", "Adjuntas", "PR", "Adjuntas", 18.18, -66.75)
        b = compute_state_boundaries([rec])["PR"]
        assert b.easternmost is b.westernmost is b.northernmost is b.southernmost is rec

    def test_empty(self):
        assert compute_state_boundaries([]) == {}
        assert format_boundaries({}) == [REPORT_HEADER, "-" * 74]

    def test_format_line(self):
        rec = ZipCodeRecord("00601", "Adjuntas", "PR", "Adjuntas", 18.18, -66.75)
        lines = format_boundaries(compute_state_boundaries([rec]))
        assert lines[2] == ("PR | 00601 (Adjuntas) | 00601 (Adjuntas) | "
                            "00601 (Adjuntas) | 00601 (Adjuntas)")

    def test_write_report(self, tmp_dir, ny_records):
        path = os.path.join(tmp_dir, "report.txt")
        boundaries = compute_state_boundaries(ny_records)
        write_boundaries(boundaries, path)
        with open(path, encoding="utf-8") as f:
            assert f.read().splitlines() == format_boundaries(boundaries)
