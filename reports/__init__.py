"""
ZipDB Reports
=============
Read-only summaries computed over an in-memory record collection.
"""

from reports.boundaries import (
    StateBoundaries, compute_state_boundaries, format_boundaries, write_boundaries,
)

__all__ = [
    "StateBoundaries", "compute_state_boundaries", "format_boundaries",
    "write_boundaries",
]
