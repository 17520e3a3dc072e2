"""
ZipDB Record Codec
==================
Encodes one ZipCodeRecord to the payload bytes of a store frame and back.

Payload layout (UTF-8 text, no trailing newline):
  zip_code,place_name,state,county,latitude,longitude

The separator may not appear inside any field, so encoding a record whose
string fields contain ',' (or a line break) fails instead of producing a
payload that would decode to different fields. Coordinates are written in
their shortest round-trip decimal form, so decode(encode(r)) == r.
"""

from typing import Union

from storage.errors import MalformedRecord
from storage.record import (
    FIELD_COUNT, ZipCodeRecord, format_coordinate, parse_coordinate,
)

FIELD_SEPARATOR = ","
ENCODING = "utf-8"

_FORBIDDEN = (FIELD_SEPARATOR, "\n", "\r")


def check_text_field(name: str, value: str) -> str:
    """Return value unchanged, or raise MalformedRecord if it cannot be stored."""
    if not isinstance(value, str):
        raise MalformedRecord(f"Field '{name}' must be a string, got {type(value).__name__}")
    for ch in _FORBIDDEN:
        if ch in value:
            raise MalformedRecord(
                f"Field '{name}' contains forbidden character {ch!r}: {value!r}")
    return value


def encode_record(record: ZipCodeRecord) -> bytes:
    """Serialize a record into its frame payload."""
    if not record.zip_code:
        raise MalformedRecord("Record has an empty zip code")
    fields = [
        check_text_field("zip_code", record.zip_code),
        check_text_field("place_name", record.place_name),
        check_text_field("state", record.state),
        check_text_field("county", record.county),
        format_coordinate(record.latitude, "latitude"),
        format_coordinate(record.longitude, "longitude"),
    ]
    return FIELD_SEPARATOR.join(fields).encode(ENCODING)


def _split_payload(payload: Union[bytes, bytearray, memoryview]) -> list[str]:
    try:
        text = bytes(payload).decode(ENCODING)
    except UnicodeDecodeError as e:
        raise MalformedRecord(f"Payload is not valid UTF-8: {e}") from None
    return text.split(FIELD_SEPARATOR)


def decode_record(payload: Union[bytes, bytearray, memoryview]) -> ZipCodeRecord:
    """
    Deserialize a frame payload.

    Raises MalformedRecord if the payload does not hold exactly six fields
    or if a coordinate does not parse.
    """
    fields = _split_payload(payload)
    if len(fields) != FIELD_COUNT:
        raise MalformedRecord(
            f"Expected {FIELD_COUNT} fields, got {len(fields)}: {fields!r}")

    zip_code, place_name, state, county, lat, lng = fields
    return ZipCodeRecord(
        zip_code=zip_code,
        place_name=place_name,
        state=state,
        county=county,
        latitude=parse_coordinate(lat, "latitude"),
        longitude=parse_coordinate(lng, "longitude"),
    )


def decode_key(payload: Union[bytes, bytearray, memoryview]) -> str:
    """Return only the zip code (first field) of a payload."""
    return _split_payload(payload)[0]
