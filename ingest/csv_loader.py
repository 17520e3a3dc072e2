"""
ZipDB CSV Loader
================
Reads the postal-code CSV (header row first) into records.

Expected columns, in order:
  zip code, place name, state, county, latitude, longitude

Bad rows (wrong field count, unstorable text, non-numeric coordinate) are
logged with their line number and skipped; loading continues. Empty
coordinates become 0.0.
"""

import csv
import logging
import os
from typing import Iterator, Sequence, Union

from storage.codec import check_text_field
from storage.errors import MalformedRecord, SourceUnreadable
from storage.record import FIELD_COUNT, ZipCodeRecord, parse_coordinate

logger = logging.getLogger("zipdb.ingest")

PathLike = Union[str, "os.PathLike[str]"]


def parse_row(fields: Sequence[str]) -> ZipCodeRecord:
    """Build a record from six raw text fields. Raises MalformedRecord."""
    if len(fields) != FIELD_COUNT:
        raise MalformedRecord(
            f"Expected {FIELD_COUNT} fields, got {len(fields)}")

    zip_code, place_name, state, county, lat, lng = (f.strip() for f in fields)
    if not zip_code:
        raise MalformedRecord("Empty zip code")

    return ZipCodeRecord(
        zip_code=check_text_field("zip_code", zip_code),
        place_name=check_text_field("place_name", place_name),
        state=check_text_field("state", state),
        county=check_text_field("county", county),
        latitude=parse_coordinate(lat, "latitude"),
        longitude=parse_coordinate(lng, "longitude"),
    )


def iter_csv_records(source: PathLike) -> Iterator[ZipCodeRecord]:
    """Yield records from a CSV file, skipping the header row and bad rows."""
    path = os.fspath(source)
    try:
        f = open(path, "r", encoding="utf-8-sig", newline="")
    except OSError as e:
        raise SourceUnreadable(path, e.strerror or str(e)) from e

    with f:
        reader = csv.reader(f)
        next(reader, None)  # header
        skipped = 0
        for fields in reader:
            if not fields or not any(field.strip() for field in fields):
                continue
            try:
                yield parse_row(fields)
            except MalformedRecord as e:
                skipped += 1
                logger.warning("%s:%d: skipping row: %s", path, reader.line_num, e)
        if skipped:
            logger.info("%s: %d malformed row(s) skipped", path, skipped)


def load_csv(source: PathLike) -> list[ZipCodeRecord]:
    """Load every valid row of a CSV file, in file order."""
    return list(iter_csv_records(source))
