"""
ZipDB Configuration
===================
File names and locations used by the command layer.

All files live in one data directory (default: the current directory).
Relative names are resolved against it; absolute names are used as given.
"""

import os
from dataclasses import dataclass, field

DEFAULT_CSV_FILE = "us_postal_codes_ROWS_RANDOMIZED.csv"
DEFAULT_STORE_FILE = "us_postal_codes.dat"
DEFAULT_INDEX_FILE = "primary_key_index.dat"
DEFAULT_REPORT_FILE = "sorted_state_boundaries.txt"


@dataclass
class ZipDBConfig:
    """Run-time file layout for one ZipDB invocation."""
    data_dir: str = field(default_factory=os.getcwd)
    csv_file: str = DEFAULT_CSV_FILE
    store_file: str = DEFAULT_STORE_FILE
    index_file: str = DEFAULT_INDEX_FILE
    report_file: str = DEFAULT_REPORT_FILE

    def _resolve(self, name: str) -> str:
        return os.path.join(self.data_dir, name)

    @property
    def csv_path(self) -> str:
        return self._resolve(self.csv_file)

    @property
    def store_path(self) -> str:
        return self._resolve(self.store_file)

    @property
    def index_path(self) -> str:
        return self._resolve(self.index_file)

    @property
    def report_path(self) -> str:
        return self._resolve(self.report_file)
