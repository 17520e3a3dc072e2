"""
ZipDB Commands
==============
The operations behind the command line, one function per command.

  run_pipeline   CSV -> boundary report -> store file -> primary-key index
  search_zip     index lookup + offset read for one zip code
  show_header    extended header info of the store file
  dump_store     every record of the store file, as a table

Errors propagate to the caller (main.py renders them and sets the exit
status). A zip code that is not indexed is reported, not raised.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from cli.config import ZipDBConfig
from cli.renderer import Renderer
from indexing.primary_index import build_index, lookup
from ingest.buffer import RecordBuffer
from reports.boundaries import compute_state_boundaries, format_boundaries, write_boundaries
from storage.header import StoreHeader
from storage.reader import iter_records, read_at, read_header
from storage.record import ZipCodeRecord

logger = logging.getLogger("zipdb.cli")


@dataclass
class PipelineResult:
    """Counts produced by one full pipeline run."""
    records_loaded: int
    states: int
    header: StoreHeader
    index_entries: int


def run_pipeline(config: ZipDBConfig, renderer: Renderer) -> PipelineResult:
    """
    Full rebuild:
      1. Load the CSV (bad rows skipped)
      2. Print and write the state boundary report
      3. Write the store file
      4. Build the primary-key index from the store file
    """
    buffer = RecordBuffer()
    loaded = buffer.load_csv(config.csv_path)
    renderer.render_message(f"CSV file loaded: {config.csv_path} ({loaded} records)")

    boundaries = compute_state_boundaries(buffer)
    renderer.render_lines(format_boundaries(boundaries))
    write_boundaries(boundaries, config.report_path)
    renderer.render_message(f"Sorted state boundaries written to: {config.report_path}")

    header = buffer.write_store(config.store_path)
    renderer.render_message(f"Length-indicated file written: {config.store_path}")

    entries = build_index(config.store_path, config.index_path)
    renderer.render_message(f"Primary key index file created: {config.index_path}")

    return PipelineResult(
        records_loaded=loaded,
        states=len(boundaries),
        header=header,
        index_entries=entries,
    )


def find_zip(config: ZipDBConfig, zip_code: str) -> Optional[ZipCodeRecord]:
    """Look up zip_code in the index and decode its record, or None."""
    offset = lookup(config.index_path, zip_code)
    if offset is None:
        logger.debug("zip %s not in %s", zip_code, config.index_path)
        return None
    logger.debug("zip %s at offset %d", zip_code, offset)
    return read_at(config.store_path, offset)


def search_zip(config: ZipDBConfig, renderer: Renderer,
               zip_code: str) -> Optional[ZipCodeRecord]:
    """find_zip, rendering the record or a not-found line."""
    record = find_zip(config, zip_code)
    if record is None:
        renderer.render_not_found(zip_code)
    else:
        renderer.render_record(record)
    return record


def show_header(config: ZipDBConfig, renderer: Renderer) -> StoreHeader:
    header = read_header(config.store_path)
    renderer.render_header_info(header, index_file=config.index_file)
    return header


def dump_store(config: ZipDBConfig, renderer: Renderer) -> int:
    return renderer.render_records(iter_records(config.store_path))
