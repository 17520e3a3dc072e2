"""
ZipDB Output Renderer
=====================
Formats records, store headers and reports for the terminal.

Features:
  - Single-record line ("Zip Code: ..., Place: ...")
  - Streaming record table: column widths sampled from the first rows,
    remaining rows printed as they arrive
  - Extended header info (stored fields plus derived layout description)
  - Error rendering with a classification prefix
"""

import sys
from typing import Dict, Iterable, List, Optional, TextIO

from storage.header import StoreHeader
from storage.record import FIELD_COUNT, FIELD_INFO, FIELD_NAMES, ZipCodeRecord

TABLE_HEADERS = ["zip", "place", "state", "county", "lat", "lng"]


class Renderer:
    """
    Terminal renderer with a configurable output stream.
    """

    def __init__(self, output: TextIO = None):
        self.output = output or sys.stdout
        self.show_headers: bool = True
        self.display_limit: Optional[int] = None  # None = no limit
        self.max_col_width: int = 40
        self.sample_size: int = 100

    # ─── Public API ─────────────────────────────────────────────────

    def render_record(self, record: ZipCodeRecord):
        """One-line description of a record."""
        self._print(
            f"Zip Code: {record.zip_code}"
            f", Place: {record.place_name}"
            f", State: {record.state}"
            f", County: {record.county}"
            f", Lat: {self._format_value(record.latitude)}"
            f", Long: {self._format_value(record.longitude)}")

    def render_not_found(self, zip_code: str):
        self._print(f"Zip Code {zip_code} not found.")

    def render_header_info(self, header: StoreHeader, index_file: str = ""):
        """Stored header fields followed by the derived layout description."""
        self._print(f"File Type: {header.tag}")
        self._print(f"Version: {header.version}")
        self._print(f"Header Size: {header.header_size} bytes")
        self._print(f"Record Count: {header.record_count}")
        self._print("Bytes per Record: variable (length-indicated)")
        self._print("Size Format Type: binary")
        if index_file:
            self._print(f"Primary Key Index File Name: {index_file}")
        self._print(f"Field Count: {FIELD_COUNT}")
        self._print("Field Information:")
        for i, (name, type_label) in enumerate(FIELD_INFO, start=1):
            self._print(f"  {i}. {name} ({type_label})")

    def render_lines(self, lines: Iterable[str]):
        for line in lines:
            self._print(line)

    def render_message(self, message: str):
        if message:
            self._print(message)

    def render_records(self, records: Iterable[ZipCodeRecord]) -> int:
        """
        Render records as an aligned table. Returns the number rendered.

        Buffers the first sample_size rows to size the columns, then
        streams the rest using those widths.
        """
        rows = iter(records)
        headers = TABLE_HEADERS

        buffer: List[Dict[str, object]] = []
        for record in rows:
            if self.display_limit is not None and len(buffer) >= self.display_limit:
                break
            buffer.append(self._extract_values(record))
            if len(buffer) >= self.sample_size:
                break

        widths = self._calculate_widths(headers, buffer)

        if self.show_headers:
            self._print_table_separator(widths, headers)
            self._print_table_row(widths, headers, {h: h for h in headers})
            self._print_table_separator(widths, headers)

        count = 0
        for vals in buffer:
            self._print_table_row(widths, headers, vals)
            count += 1

        for record in rows:
            if self.display_limit is not None and count >= self.display_limit:
                self._print(f"... (display limit {self.display_limit} reached)")
                break
            self._print_table_row(widths, headers, self._extract_values(record))
            count += 1

        if self.show_headers and count > 0:
            self._print_table_separator(widths, headers)

        self._print(f"\n{count} record(s)")
        return count

    def render_error(self, error: Exception):
        """Render an error with classification prefix."""
        prefix = self._classify_error(type(error).__name__)
        self._print(f"{prefix}: {error}")

    # ─── Table helpers ──────────────────────────────────────────────

    def _extract_values(self, record: ZipCodeRecord) -> Dict[str, object]:
        return dict(zip(TABLE_HEADERS, (getattr(record, f) for f in FIELD_NAMES)))

    def _calculate_widths(self, headers: List[str], rows: List[Dict]) -> Dict[str, int]:
        widths = {h: min(len(h), self.max_col_width) for h in headers}
        for row in rows:
            for h in headers:
                val = self._format_value(row.get(h))
                widths[h] = max(widths[h], min(len(val), self.max_col_width))
        return widths

    def _print_table_separator(self, widths: Dict[str, int], headers: List[str]):
        """Print +----+------+ separator line."""
        parts = ["+"]
        for h in headers:
            parts.append("-" * (widths[h] + 2) + "+")
        self._print("".join(parts))

    def _print_table_row(self, widths: Dict[str, int], headers: List[str], vals: Dict):
        """Print | col1 | col2 | row."""
        parts = ["|"]
        for h in headers:
            raw_val = vals.get(h)
            val_str = self._format_value(raw_val)
            if len(val_str) > self.max_col_width:
                val_str = val_str[:self.max_col_width - 3] + "..."
            w = widths[h]
            # Right-align numbers, left-align strings
            if isinstance(raw_val, float):
                parts.append(f" {val_str:>{w}} |")
            else:
                parts.append(f" {val_str:<{w}} |")
        self._print("".join(parts))

    def _format_value(self, value) -> str:
        if isinstance(value, float):
            return f"{value:.6g}"
        return str(value)

    def _classify_error(self, error_type: str) -> str:
        """Map error class name to user-friendly prefix."""
        mapping = {
            "SourceUnreadable": "IOError",
            "DestinationUnwritable": "IOError",
            "MalformedRecord": "DataError",
            "TruncatedHeader": "DataError",
            "TruncatedRecord": "DataError",
            "StoreFormatError": "FormatError",
            "IndexFormatError": "FormatError",
            "ValueError": "Error",
        }
        return mapping.get(error_type, f"Error[{error_type}]")

    def _print(self, text: str):
        print(text, file=self.output)
