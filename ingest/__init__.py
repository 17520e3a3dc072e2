"""
ZipDB Ingest
============
Turns the raw postal-code CSV into ZipCodeRecord values and holds the
caller-owned in-memory collection.

Components:
  - csv_loader: row parsing, tolerant bulk load
  - buffer: RecordBuffer (load CSV / store, lookup by zip, group by state)
"""

from ingest.csv_loader import parse_row, iter_csv_records, load_csv
from ingest.buffer import RecordBuffer

__all__ = ["parse_row", "iter_csv_records", "load_csv", "RecordBuffer"]
