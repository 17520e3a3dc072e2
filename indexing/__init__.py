"""
ZipDB Indexing Module
=====================
Primary-key (zip code -> frame offset) index over a store file.

Components:
  - primary_index: build from a store, linear lookup, in-memory loading
"""

from indexing.primary_index import (
    PrimaryKeyIndex, build_index, lookup, load_index, iter_entries,
)

__all__ = ["PrimaryKeyIndex", "build_index", "lookup", "load_index", "iter_entries"]
