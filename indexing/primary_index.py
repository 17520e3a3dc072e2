"""
ZipDB Primary-Key Index
=======================
Side file mapping each record's zip code to the byte offset of its frame
in the store file.

Index file format (text, one entry per line, in store order):
  <zip_code> <offset>\\n

The offset is the position of the frame's 4-byte length prefix, so it can
be handed straight to storage.reader.read_at().

Lifecycle: absent -> building -> complete. The file is built through a
temp file + os.replace(), so a failed build leaves the previous index (or
no index) in place. An index is only valid for the exact store file it was
built from; rebuild it whenever the store is rewritten.

Duplicate keys: every frame gets a line. Lookups return the FIRST line
with a matching key, i.e. the record written first.
"""

import logging
import os
from typing import Dict, Iterator, Optional, Tuple, Union

from storage.codec import ENCODING, decode_key
from storage.errors import IndexFormatError, SourceUnreadable
from storage.reader import iter_frames
from storage.writer import atomic_write

logger = logging.getLogger("zipdb.indexing")

PathLike = Union[str, "os.PathLike[str]"]

ENTRY_SEPARATOR = " "


def format_entry(key: str, offset: int) -> str:
    """One index line (with trailing newline)."""
    return f"{key}{ENTRY_SEPARATOR}{offset}\n"


def parse_entry(line: str) -> Tuple[str, int]:
    """Split an index line into (key, offset). Raises ValueError if malformed."""
    key, sep, offset_text = line.rstrip("\n").rpartition(ENTRY_SEPARATOR)
    if not sep or not key:
        raise ValueError(f"missing separator in {line!r}")
    offset = int(offset_text)
    if offset < 0:
        raise ValueError(f"negative offset in {line!r}")
    return key, offset


# ─── Build ──────────────────────────────────────────────────────────────────

def _entries(store_source: PathLike) -> Iterator[bytes]:
    for offset, payload in iter_frames(store_source):
        key = decode_key(payload)
        logger.debug("index %s -> %d", key, offset)
        yield format_entry(key, offset).encode(ENCODING)


def build_index(store_source: PathLike, index_destination: PathLike) -> int:
    """
    Scan the store's frames and write one '<key> <offset>' line per frame.

    Returns the number of entries written. Raises SourceUnreadable /
    TruncatedHeader / TruncatedRecord from the store scan and
    DestinationUnwritable if the index cannot be created.
    """
    count = 0

    def counted() -> Iterator[bytes]:
        nonlocal count
        for entry in _entries(store_source):
            count += 1
            yield entry

    atomic_write(index_destination, counted())
    logger.info("Primary key index file created: %s (%d entries)",
                os.fspath(index_destination), count)
    return count


# ─── Lookup ─────────────────────────────────────────────────────────────────

def iter_entries(index_source: PathLike) -> Iterator[Tuple[str, int]]:
    """Yield (key, offset) for every line of the index, in file order."""
    path = os.fspath(index_source)
    try:
        f = open(path, "r", encoding=ENCODING, newline="\n")
    except OSError as e:
        raise SourceUnreadable(path, e.strerror or str(e)) from e
    with f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                yield parse_entry(line)
            except ValueError:
                raise IndexFormatError(path, line_no, line.rstrip("\n")) from None


def lookup(index_source: PathLike, key: str) -> Optional[int]:
    """
    Linear scan for key. Returns the offset of the first matching entry,
    or None if the key is not in the index.
    """
    for entry_key, offset in iter_entries(index_source):
        if entry_key == key:
            return offset
    return None


def load_index(index_source: PathLike) -> Dict[str, int]:
    """Load the whole index into a dict. First entry wins for duplicate keys."""
    mapping: Dict[str, int] = {}
    for key, offset in iter_entries(index_source):
        mapping.setdefault(key, offset)
    return mapping


class PrimaryKeyIndex:
    """
    In-memory copy of an index file for repeated lookups.

    Same contract as lookup(): first-built entry wins, None when absent.
    """

    def __init__(self, entries: Dict[str, int], source: Optional[str] = None):
        self._entries = entries
        self._source = source

    @classmethod
    def load(cls, index_source: PathLike) -> "PrimaryKeyIndex":
        return cls(load_index(index_source), os.fspath(index_source))

    @property
    def source(self) -> Optional[str]:
        return self._source

    def lookup(self, key: str) -> Optional[int]:
        return self._entries.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
