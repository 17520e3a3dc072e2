"""
ZipDB Record Buffer
===================
The in-memory record collection a caller loads and owns.

Records keep their load order. Lookups by zip code scan in that order, so
a duplicate zip code resolves to the first record loaded, the same rule
the on-disk primary-key index follows.
"""

import os
from collections import OrderedDict
from typing import Dict, Iterable, Iterator, List, Optional, Union

from ingest.csv_loader import load_csv
from storage.header import StoreHeader
from storage.reader import read_all
from storage.record import ZipCodeRecord
from storage.writer import write_store

PathLike = Union[str, "os.PathLike[str]"]


class RecordBuffer:
    """
    Ordered collection of ZipCodeRecords.

    Usage:
        buf = RecordBuffer()
        buf.load_csv("us_postal_codes.csv")
        buf.write_store("us_postal_codes.dat")
        rec = buf.get_by_zip("00601")
    """

    def __init__(self, records: Optional[Iterable[ZipCodeRecord]] = None):
        self._records: List[ZipCodeRecord] = list(records or [])

    @property
    def records(self) -> List[ZipCodeRecord]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ZipCodeRecord]:
        return iter(self._records)

    # ─── Loading ────────────────────────────────────────────────────

    def load_csv(self, source: PathLike) -> int:
        """Append all valid CSV rows. Returns the number of records added."""
        loaded = load_csv(source)
        self._records.extend(loaded)
        return len(loaded)

    def load_store(self, source: PathLike) -> int:
        """Append all decodable records of a store file. Returns the count added."""
        loaded = read_all(source)
        self._records.extend(loaded)
        return len(loaded)

    def write_store(self, destination: PathLike) -> StoreHeader:
        """Write the buffered records to a store file."""
        return write_store(self._records, destination)

    # ─── Queries ────────────────────────────────────────────────────

    def get_by_zip(self, zip_code: str) -> Optional[ZipCodeRecord]:
        """First record with the given zip code, or None."""
        for record in self._records:
            if record.zip_code == zip_code:
                return record
        return None

    def by_state(self) -> Dict[str, List[ZipCodeRecord]]:
        """Group records by state, states in first-seen order."""
        groups: Dict[str, List[ZipCodeRecord]] = OrderedDict()
        for record in self._records:
            groups.setdefault(record.state, []).append(record)
        return groups
