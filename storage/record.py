"""
ZipDB Record Model
==================
The single record type stored by ZipDB: one geocoded postal code.

Coordinate policy:
  The same parser is used when ingesting CSV rows and when decoding stored
  payloads. Empty text means "no coordinate" and becomes 0.0 in both paths.
  Anything else that is not a finite decimal number is malformed.
"""

import math
import re
from dataclasses import dataclass

from storage.errors import MalformedRecord

# Plain decimal text, optional exponent. No underscores, no inf/nan words.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

FIELD_COUNT = 6

FIELD_NAMES = (
    "zip_code", "place_name", "state", "county", "latitude", "longitude",
)

# (display name, type label) pairs, used by the header info display
FIELD_INFO = (
    ("ZipCode", "String"),
    ("PlaceName", "String"),
    ("State", "String"),
    ("County", "String"),
    ("Latitude", "Double"),
    ("Longitude", "Double"),
)


@dataclass
class ZipCodeRecord:
    """One postal code with its place, state, county and coordinates."""
    zip_code: str
    place_name: str
    state: str
    county: str
    latitude: float = 0.0
    longitude: float = 0.0


def parse_coordinate(text: str, field_name: str = "coordinate") -> float:
    """
    Parse a latitude/longitude field.

    Empty or whitespace-only text yields 0.0. Non-numeric or non-finite
    text raises MalformedRecord.
    """
    text = text.strip()
    if not text:
        return 0.0
    if not _DECIMAL_RE.fullmatch(text):
        raise MalformedRecord(f"Invalid {field_name} value: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise MalformedRecord(f"Non-finite {field_name} value: {text!r}")
    return value


def format_coordinate(value: float, field_name: str = "coordinate") -> str:
    """
    Canonical decimal text for a coordinate (shortest round-trip form).

    Raises MalformedRecord for NaN and infinities, which parse_coordinate
    would refuse to read back.
    """
    value = float(value)
    if not math.isfinite(value):
        raise MalformedRecord(f"Non-finite {field_name} value: {value!r}")
    return repr(value)
