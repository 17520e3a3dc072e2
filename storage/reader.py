"""
ZipDB Store Reader
==================
Read paths over a length-indicated store file.

  read_header(path)      parse the fixed header only
  iter_frames(path)      (offset, payload) for every frame, in file order
  read_all(path)         decode every frame (bulk load, skips bad rows)
  read_at(path, offset)  decode the single frame starting at offset

read_at is the fast path used by key lookup: it seeks straight to the
offset, reads one length prefix and one payload, and decodes. It does not
check that the offset is a frame boundary. A wrong offset produces a
MalformedRecord / TruncatedRecord (or a garbage record), never a crash.

Every call opens its own handle and closes it before returning (or when
the frame iterator is exhausted or closed).
"""

import logging
import os
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Tuple, Union

from storage.codec import decode_record
from storage.errors import (
    MalformedRecord, SourceUnreadable, StoreFormatError,
    TruncatedHeader, TruncatedRecord,
)
from storage.header import (
    FILE_TAG, FIXED_FIELDS_SIZE, FIXED_FIELDS_STRUCT, FORMAT_VERSION,
    LENGTH_PREFIX_SIZE, TAG_TERMINATOR, StoreHeader, unpack_length,
)
from storage.record import ZipCodeRecord

logger = logging.getLogger("zipdb.storage")

PathLike = Union[str, "os.PathLike[str]"]

# Longest tag accepted before the header is declared foreign
MAX_TAG_LENGTH = 255


@contextmanager
def open_source(source: PathLike) -> Iterator[BinaryIO]:
    """Open a file read-only in binary mode, mapping failures to SourceUnreadable."""
    path = os.fspath(source)
    try:
        f = open(path, "rb")
    except OSError as e:
        raise SourceUnreadable(path, e.strerror or str(e)) from e
    with f:
        yield f


# ─── Header ─────────────────────────────────────────────────────────────────

def _parse_header(f: BinaryIO) -> StoreHeader:
    """Parse the header from the start of f, leaving f at the first frame."""
    f.seek(0)
    raw = f.read(MAX_TAG_LENGTH + len(TAG_TERMINATOR) + FIXED_FIELDS_SIZE)

    nul = raw.find(TAG_TERMINATOR)
    if nul < 0:
        if len(raw) <= MAX_TAG_LENGTH:
            raise TruncatedHeader(
                "Header tag not terminated", 0, len(raw) + 1, len(raw))
        raise StoreFormatError(
            f"Header tag longer than {MAX_TAG_LENGTH} bytes; not a ZipDB store")

    fixed_start = nul + len(TAG_TERMINATOR)
    fixed = raw[fixed_start:fixed_start + FIXED_FIELDS_SIZE]
    if len(fixed) < FIXED_FIELDS_SIZE:
        raise TruncatedHeader(
            "Header fields cut short", fixed_start, FIXED_FIELDS_SIZE, len(fixed))

    try:
        tag = raw[:nul].decode("ascii")
    except UnicodeDecodeError:
        raise StoreFormatError(f"Header tag is not ASCII: {raw[:nul]!r}") from None

    version, header_size, record_count = FIXED_FIELDS_STRUCT.unpack(fixed)

    if tag != FILE_TAG:
        raise StoreFormatError(f"Unknown file type {tag!r} (expected {FILE_TAG!r})")
    if version != FORMAT_VERSION:
        raise StoreFormatError(
            f"Unsupported format version {version} (expected {FORMAT_VERSION})")
    parsed_size = fixed_start + FIXED_FIELDS_SIZE
    if header_size != parsed_size:
        raise StoreFormatError(
            f"Header size mismatch: declared {header_size}, parsed {parsed_size}")

    f.seek(header_size)
    return StoreHeader(record_count=record_count, tag=tag,
                       version=version, header_size=header_size)


def read_header(source: PathLike) -> StoreHeader:
    """Parse and return the header of a store file."""
    with open_source(source) as f:
        return _parse_header(f)


# ─── Frames ─────────────────────────────────────────────────────────────────

def _read_frame(f: BinaryIO, offset: int) -> bytes:
    """Read one [length][payload] frame from the current position (== offset)."""
    prefix = f.read(LENGTH_PREFIX_SIZE)
    if len(prefix) < LENGTH_PREFIX_SIZE:
        raise TruncatedRecord(
            "Record length prefix cut short", offset, LENGTH_PREFIX_SIZE, len(prefix))

    length = unpack_length(prefix)
    payload = f.read(length)
    if len(payload) < length:
        raise TruncatedRecord(
            "Record payload cut short", offset + LENGTH_PREFIX_SIZE,
            length, len(payload))
    return payload


def iter_frames(source: PathLike) -> Iterator[Tuple[int, bytes]]:
    """
    Yield (frame_start_offset, payload) for each of the header's
    record_count frames, in file order.
    """
    with open_source(source) as f:
        header = _parse_header(f)
        offset = header.first_record_offset
        for _ in range(header.record_count):
            payload = _read_frame(f, offset)
            yield offset, payload
            offset += LENGTH_PREFIX_SIZE + len(payload)


# ─── Decoding read paths ────────────────────────────────────────────────────

def iter_records(source: PathLike, *,
                 skip_malformed: bool = True) -> Iterator[ZipCodeRecord]:
    """Decode frames lazily; see read_all for the error policy."""
    for offset, payload in iter_frames(source):
        try:
            yield decode_record(payload)
        except MalformedRecord as e:
            if not skip_malformed:
                raise
            logger.warning("Skipping malformed record at offset %d: %s", offset, e)


def read_all(source: PathLike, *, skip_malformed: bool = True) -> list[ZipCodeRecord]:
    """
    Read the header and decode all record_count frames in order.

    Malformed payloads are logged and skipped unless skip_malformed is
    False. Truncation always raises TruncatedRecord.
    """
    return list(iter_records(source, skip_malformed=skip_malformed))


def read_at(source: PathLike, offset: int) -> ZipCodeRecord:
    """
    Decode the single frame starting at offset.

    Raises MalformedRecord / TruncatedRecord if the bytes at offset do not
    form a decodable frame.
    """
    if offset < 0:
        raise ValueError(f"Offset must be non-negative, got {offset}")
    with open_source(source) as f:
        f.seek(offset)
        payload = _read_frame(f, offset)
    return decode_record(payload)


class StoreReader:
    """
    Path-bound convenience wrapper over the read functions.

    Holds no open handle and caches nothing; each method opens and closes
    the file itself, so a rebuilt store is seen on the next call.
    """

    def __init__(self, file_path: PathLike):
        self._file_path = os.fspath(file_path)

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def header(self) -> StoreHeader:
        """Header as currently on disk; re-read on every access."""
        return read_header(self._file_path)

    def records(self, *, skip_malformed: bool = True) -> Iterator[ZipCodeRecord]:
        return iter_records(self._file_path, skip_malformed=skip_malformed)

    def frames(self) -> Iterator[Tuple[int, bytes]]:
        return iter_frames(self._file_path)

    def read_all(self, *, skip_malformed: bool = True) -> list[ZipCodeRecord]:
        return read_all(self._file_path, skip_malformed=skip_malformed)

    def read_at(self, offset: int) -> ZipCodeRecord:
        return read_at(self._file_path, offset)
