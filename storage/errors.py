"""
ZipDB Error Taxonomy
====================
Every failure the storage and indexing layers can report.

Propagation rules:
  - Bulk loads (CSV ingest, read_all) log MalformedRecord and skip the row.
  - Targeted reads (read_at) always propagate; there is no next row.
  - Open failures are fatal to the operation that asked for the file.

A key missing from the index is NOT an error: lookup returns None.
"""


class ZipDBError(Exception):
    """Base class for all ZipDB errors."""
    pass


class SourceUnreadable(ZipDBError):
    """Raised when an input file cannot be opened for reading."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Unable to open file: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class DestinationUnwritable(ZipDBError):
    """Raised when an output file cannot be opened for writing."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Unable to open output file: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class MalformedRecord(ZipDBError):
    """Raised when a record payload has the wrong field count or bad numbers."""
    pass


class TruncatedData(ZipDBError):
    """Fewer bytes were available than a length or fixed field declares."""

    def __init__(self, message: str, offset: int, expected: int, available: int):
        self.offset = offset
        self.expected = expected
        self.available = available
        super().__init__(
            f"{message} at offset {offset}: "
            f"expected {expected} bytes, got {available}")


class TruncatedHeader(TruncatedData):
    """The store file ends inside its header."""
    pass


class TruncatedRecord(TruncatedData):
    """A record frame would read past end-of-file."""
    pass


class StoreFormatError(ZipDBError):
    """The store header carries an unknown tag, version, or header size."""
    pass


class IndexFormatError(ZipDBError):
    """An index line is not of the form '<key> <offset>'."""

    def __init__(self, path: str, line_no: int, line: str):
        self.path = path
        self.line_no = line_no
        self.line = line
        super().__init__(f"{path}:{line_no}: malformed index entry {line!r}")
