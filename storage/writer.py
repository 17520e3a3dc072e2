"""
ZipDB Store Writer
==================
Materializes a record sequence into a length-indicated store file.

Write strategy:
  1. Encode every record up front (an unencodable record aborts the write
     before any byte reaches disk).
  2. Write header + frames to a temp file in the destination directory.
  3. fsync, then os.replace() over the destination.

The destination is therefore either the complete new file or whatever was
there before. A crash mid-write only leaves a stray *.tmp file behind.
"""

import logging
import os
import tempfile
from typing import Iterable, Union

from storage.codec import encode_record
from storage.errors import DestinationUnwritable
from storage.header import StoreHeader, pack_length
from storage.record import ZipCodeRecord

logger = logging.getLogger("zipdb.storage")

PathLike = Union[str, "os.PathLike[str]"]


def _default_file_mode() -> int:
    """Mode a plain open(path, "w") would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write(destination: PathLike, chunks: Iterable[bytes]) -> int:
    """
    Write byte chunks to destination via temp file + rename.
    Returns the number of bytes written.
    The result gets the umask default mode, not mkstemp's private 0600.
    """
    dest = os.path.abspath(os.fspath(destination))
    dest_dir = os.path.dirname(dest)

    if os.path.isdir(dest):
        raise DestinationUnwritable(dest, "is a directory")

    try:
        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=dest_dir, prefix=os.path.basename(dest) + ".", suffix=".tmp")
    except OSError as e:
        raise DestinationUnwritable(dest, e.strerror or str(e)) from e

    written = 0
    try:
        with os.fdopen(tmp_fd, "wb") as f:
            for chunk in chunks:
                f.write(chunk)
                written += len(chunk)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, dest)
    except Exception:
        # Clean up temp file on failure
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return written


def _frames(header: StoreHeader, payloads: list[bytes]) -> Iterable[bytes]:
    yield header.to_bytes()
    for payload in payloads:
        yield pack_length(len(payload))
        yield payload


def write_store(records: Iterable[ZipCodeRecord], destination: PathLike) -> StoreHeader:
    """
    Write a complete store file: header followed by one frame per record,
    in input order. Overwrites destination.

    Returns the header that was written.
    Raises DestinationUnwritable if the file cannot be created and
    MalformedRecord if a record cannot be encoded.
    """
    payloads = [encode_record(r) for r in records]
    header = StoreHeader(record_count=len(payloads))

    size = atomic_write(destination, _frames(header, payloads))
    logger.info("Length-indicated file written: %s (%d records, %d bytes)",
                os.fspath(destination), header.record_count, size)
    return header
