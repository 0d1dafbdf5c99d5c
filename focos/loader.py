"""
Dataset loader (merged CSV -> OccurrenceRecord list -> store)
=============================================================

This module reads the canonical merged CSV and puts its records into a
`RecordStore`.

Key ideas:
- Columns are addressed by position; header names changed across years.
- Rows are read with `csv.reader`, so each row keeps its real width and
  short rows can be rejected. Every row is sanitized by `record_from_row`.
- A bad row is counted and skipped; it never stops the load.
- Records are saved with ONE `save_all` call, not one call per row.
- Load-if-empty: if the store already holds records, `load_records` does
  nothing. `reload_records` is the explicit "clear then load" operation.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Tuple
import csv
import logging

from .errors import FocosError
from .models import OccurrenceRecord
from .sanitize import record_from_row
from .store import RecordStore

logger = logging.getLogger(__name__)


class EmptyDataset(FocosError):
    """The merged file has no header row."""


@dataclass
class LoadReport:
    """Counts reported after a load pass."""
    path: Path
    rows_processed: int = 0
    records_saved: int = 0
    rows_skipped: int = 0
    already_loaded: bool = False
    # error class name -> number of rows
    errors: Counter = field(default_factory=Counter)

    def summary(self) -> str:
        if self.already_loaded:
            return f"Store already populated; {self.path.name} not loaded."
        return (f"Processed {self.rows_processed} rows: "
                f"{self.records_saved} saved, {self.rows_skipped} skipped.")


def iter_data_rows(path: Path, encoding: str = "utf-8") -> Iterator[Tuple[int, List[str]]]:
    """Yield (line number, row) for every non-blank data row; the header is skipped."""
    with Path(path).open("r", encoding=encoding, newline="") as f:
        reader = csv.reader(f)
        if next(reader, None) is None:
            raise EmptyDataset(f"{path} is empty")
        for row in reader:
            if any(cell.strip() for cell in row):
                yield reader.line_num, row


def load_records(
    path: Path,
    store: RecordStore,
    *,
    strict: bool = False,
    encoding: str = "utf-8",
) -> LoadReport:
    """Load the merged CSV into `store` unless the store is already populated."""
    path = Path(path)
    report = LoadReport(path=path)

    existing = store.count()
    if existing > 0:
        report.already_loaded = True
        logger.info("Store already holds %d records; load skipped", existing)
        return report

    records: List[OccurrenceRecord] = []
    try:
        for line_no, row in iter_data_rows(path, encoding=encoding):
            report.rows_processed += 1
            try:
                records.append(record_from_row(row, strict=strict))
            except FocosError as e:
                report.rows_skipped += 1
                report.errors[type(e).__name__] += 1
                logger.warning("Line %d skipped: %s", line_no, e)
    except FileNotFoundError:
        logger.error("Merged dataset not found: %s", path)
        return report
    except EmptyDataset as e:
        logger.error("%s", e)
        return report
    except UnicodeDecodeError as e:
        logger.error("%s is not valid %s (%s); set --encoding", path, encoding, e.reason)
        report.rows_skipped = report.rows_processed
        return report
    except (OSError, csv.Error) as e:
        # nothing is saved from a file that could not be read to the end
        logger.error("Could not read %s: %s", path, e)
        report.rows_skipped = report.rows_processed
        return report

    if records:
        report.records_saved = store.save_all(records)

    logger.info("%s: %d rows processed, %d records saved, %d skipped",
                path.name, report.rows_processed, report.records_saved, report.rows_skipped)
    return report


def reload_records(
    path: Path,
    store: RecordStore,
    *,
    strict: bool = False,
    encoding: str = "utf-8",
) -> LoadReport:
    """Clear the store, then load the merged CSV."""
    logger.info("Clearing %d records before reload", store.count())
    store.delete_all()
    return load_records(path, store, strict=strict, encoding=encoding)
