"""
ZipDB State Boundary Report
===========================
For every state, the zip codes lying furthest east, west, north and south.

Longitudes are signed (negative west of Greenwich), so the easternmost
record has the LARGEST longitude and the westernmost the smallest.
Ties keep the record seen first.

Report layout:
  State | Easternmost Zip | Westernmost Zip | Northernmost Zip | Southernmost Zip
  ---------------------------------------------------------------------------
  PR | 00601 (Adjuntas) | ...
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Union

from storage.record import ZipCodeRecord
from storage.writer import atomic_write

logger = logging.getLogger("zipdb.reports")

PathLike = Union[str, "os.PathLike[str]"]

REPORT_HEADER = (
    "State | Easternmost Zip | Westernmost Zip | Northernmost Zip | Southernmost Zip"
)
REPORT_RULE = "-" * 74


@dataclass
class StateBoundaries:
    """Extreme records of one state."""
    state: str
    easternmost: ZipCodeRecord
    westernmost: ZipCodeRecord
    northernmost: ZipCodeRecord
    southernmost: ZipCodeRecord

    @classmethod
    def seed(cls, record: ZipCodeRecord) -> "StateBoundaries":
        return cls(record.state, record, record, record, record)

    def update(self, record: ZipCodeRecord) -> None:
        if record.longitude > self.easternmost.longitude:
            self.easternmost = record
        if record.longitude < self.westernmost.longitude:
            self.westernmost = record
        if record.latitude > self.northernmost.latitude:
            self.northernmost = record
        if record.latitude < self.southernmost.latitude:
            self.southernmost = record


def compute_state_boundaries(
        records: Iterable[ZipCodeRecord]) -> Dict[str, StateBoundaries]:
    """Single pass over records; result is ordered by state name."""
    found: Dict[str, StateBoundaries] = {}
    for record in records:
        entry = found.get(record.state)
        if entry is None:
            found[record.state] = StateBoundaries.seed(record)
        else:
            entry.update(record)
    return {state: found[state] for state in sorted(found)}


def _cell(record: ZipCodeRecord) -> str:
    return f"{record.zip_code} ({record.place_name})"


def format_boundaries(boundaries: Dict[str, StateBoundaries]) -> List[str]:
    """Report lines (header, rule, one line per state), without newlines."""
    lines = [REPORT_HEADER, REPORT_RULE]
    for state, b in boundaries.items():
        lines.append(" | ".join([
            state, _cell(b.easternmost), _cell(b.westernmost),
            _cell(b.northernmost), _cell(b.southernmost),
        ]))
    return lines


def write_boundaries(boundaries: Dict[str, StateBoundaries],
                     destination: PathLike) -> None:
    """Write the report to a text file (overwrites)."""
    text = "".join(line + "\n" for line in format_boundaries(boundaries))
    atomic_write(destination, [text.encode("utf-8")])
    logger.info("State boundaries written to: %s", os.fspath(destination))
