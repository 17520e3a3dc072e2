"""
ZipDB Store Header
==================
The fixed header at the start of every store (.dat) file.

Layout (ALL integers LITTLE-ENDIAN; the '<' prefix in every struct format
enforces it):

  [tag: ASCII, NUL-terminated]   "ZipCodeLengthIndicated\\0"
  [version: uint16]
  [header_size: uint32]          byte length of this whole header
  [record_count: uint32]

Record frames follow immediately:

  [payload_length: uint32] [payload: payload_length bytes]

The first frame therefore starts at offset header_size.
"""

import struct
from dataclasses import dataclass

# ─── Constants ──────────────────────────────────────────────────────────────

FILE_TAG = "ZipCodeLengthIndicated"
FORMAT_VERSION = 1
TAG_TERMINATOR = b"\x00"

# version(H) header_size(I) record_count(I)
FIXED_FIELDS_FMT = "<HII"
FIXED_FIELDS_STRUCT = struct.Struct(FIXED_FIELDS_FMT)
FIXED_FIELDS_SIZE = FIXED_FIELDS_STRUCT.size   # 10 bytes

# Frame length prefix
LENGTH_PREFIX_FMT = "<I"
LENGTH_PREFIX_STRUCT = struct.Struct(LENGTH_PREFIX_FMT)
LENGTH_PREFIX_SIZE = LENGTH_PREFIX_STRUCT.size  # 4 bytes

MAX_RECORD_COUNT = 0xFFFFFFFF
MAX_PAYLOAD_LENGTH = 0xFFFFFFFF


def header_size_for(tag: str = FILE_TAG) -> int:
    """Byte length of a header carrying the given tag."""
    return len(tag.encode("ascii")) + len(TAG_TERMINATOR) + FIXED_FIELDS_SIZE


@dataclass
class StoreHeader:
    """Parsed (or to-be-written) store file header."""
    record_count: int
    tag: str = FILE_TAG
    version: int = FORMAT_VERSION
    header_size: int = 0

    def __post_init__(self):
        if not self.header_size:
            self.header_size = header_size_for(self.tag)

    @property
    def first_record_offset(self) -> int:
        """Offset of the first record frame."""
        return self.header_size

    def to_bytes(self) -> bytes:
        """Serialize the header: tag, NUL, then version/header_size/record_count."""
        if not 0 <= self.record_count <= MAX_RECORD_COUNT:
            raise ValueError(f"record_count out of range: {self.record_count}")
        return (self.tag.encode("ascii") + TAG_TERMINATOR
                + FIXED_FIELDS_STRUCT.pack(
                    self.version, self.header_size, self.record_count))


def pack_length(length: int) -> bytes:
    """Encode a frame's payload length prefix."""
    if not 0 <= length <= MAX_PAYLOAD_LENGTH:
        raise ValueError(f"payload length out of range: {length}")
    return LENGTH_PREFIX_STRUCT.pack(length)


def unpack_length(data: bytes) -> int:
    """Decode a 4-byte frame length prefix."""
    return LENGTH_PREFIX_STRUCT.unpack(data)[0]
