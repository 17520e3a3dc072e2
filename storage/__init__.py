"""
ZipDB Storage Engine
====================
Public API for the storage layer.

Usage:
    from storage import ZipCodeRecord, write_store, read_all, read_at
    from storage import read_header, StoreReader
"""

from storage.errors import (
    ZipDBError, SourceUnreadable, DestinationUnwritable, MalformedRecord,
    TruncatedData, TruncatedHeader, TruncatedRecord,
    StoreFormatError, IndexFormatError,
)
from storage.record import ZipCodeRecord, parse_coordinate, FIELD_COUNT
from storage.codec import encode_record, decode_record, FIELD_SEPARATOR
from storage.header import StoreHeader, FILE_TAG, FORMAT_VERSION
from storage.writer import write_store
from storage.reader import (
    StoreReader, read_header, iter_frames, iter_records, read_all, read_at,
)

__all__ = [
    "ZipDBError", "SourceUnreadable", "DestinationUnwritable", "MalformedRecord",
    "TruncatedData", "TruncatedHeader", "TruncatedRecord",
    "StoreFormatError", "IndexFormatError",
    "ZipCodeRecord", "parse_coordinate", "FIELD_COUNT",
    "encode_record", "decode_record", "FIELD_SEPARATOR",
    "StoreHeader", "FILE_TAG", "FORMAT_VERSION",
    "write_store",
    "StoreReader", "read_header", "iter_frames", "iter_records", "read_all", "read_at",
]
