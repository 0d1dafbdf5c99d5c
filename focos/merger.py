"""
Yearly CSV merger
=================

Source data arrives as one CSV per year (`focos_2003.csv`, `focos_2004.csv`,
...). This module concatenates them into one canonical file:

- the header row is written once (taken from the first non-empty file),
- then every data row of every file, in filename order.

Re-merging is skipped when the canonical file is already up to date. We
decide that cheaply: the largest year found in the source filenames (the
"freshness marker") must equal the year of the last row of the canonical
file. Rows are copied as-is; overlapping files are not deduplicated.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence
import csv
import logging
import os
import re

from .dates import parse_year
from .errors import NoSourceFiles
from .sanitize import COL_DATE

logger = logging.getLogger(__name__)

YEAR_MIN = 2000
YEAR_MAX = 2100

_YEAR_IN_NAME_RE = re.compile(r"\d{4}")


@dataclass
class MergeResult:
    """What one merge call did."""
    output_path: Path
    merged: bool
    freshness_year: Optional[int]
    files_merged: List[str] = field(default_factory=list)
    files_skipped: List[str] = field(default_factory=list)
    rows_written: int = 0


def list_source_files(source_dir: Path, output_path: Optional[Path] = None) -> List[Path]:
    """Return the `*.csv` files of `source_dir`, sorted by name, without the output file."""
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        return []
    out = Path(output_path).resolve() if output_path else None
    files = [p for p in source_dir.iterdir()
             if p.suffix.lower() == ".csv" and p.is_file() and p.resolve() != out]
    files.sort(key=lambda p: p.name)
    return files


def year_from_filename(name: str) -> Optional[int]:
    """Largest plausible year (2000-2100) written in a filename."""
    years = [int(m) for m in _YEAR_IN_NAME_RE.findall(name)]
    years = [y for y in years if YEAR_MIN <= y <= YEAR_MAX]
    return max(years) if years else None


def freshness_marker(paths: Sequence[Path]) -> Optional[int]:
    """Latest year referenced by any source filename."""
    years = [y for y in (year_from_filename(Path(p).name) for p in paths) if y is not None]
    return max(years) if years else None


def last_row_year(output_path: Path, encoding: str = "utf-8") -> Optional[int]:
    """Year of the last data row of the canonical file (None if unknown)."""
    output_path = Path(output_path)
    if not output_path.is_file():
        return None
    last: Optional[List[str]] = None
    try:
        with output_path.open("r", encoding=encoding, newline="") as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for row in reader:
                if any(cell.strip() for cell in row):
                    last = row
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", output_path, e)
        return None
    if last is None or len(last) <= COL_DATE:
        return None
    return parse_year(last[COL_DATE])


def needs_merge(output_path: Path, marker: Optional[int], encoding: str = "utf-8") -> bool:
    """True unless the canonical file exists and ends with the freshest year."""
    if not Path(output_path).is_file():
        return True
    return last_row_year(output_path, encoding=encoding) != marker


def _read_csv_rows(path: Path, encoding: str) -> List[List[str]]:
    with path.open("r", encoding=encoding, newline="") as f:
        return [row for row in csv.reader(f) if any(cell.strip() for cell in row)]


def merge_sources(
    source_dir: Path,
    output_path: Path,
    *,
    encoding: str = "utf-8",
    force: bool = False,
) -> MergeResult:
    """Merge every yearly CSV of `source_dir` into `output_path`.

    Raises:
        NoSourceFiles: if the directory holds no candidate CSV file.
    """
    output_path = Path(output_path)
    sources = list_source_files(source_dir, output_path)
    if not sources:
        raise NoSourceFiles(f"No CSV files found in {source_dir}")

    marker = freshness_marker(sources)
    result = MergeResult(output_path=output_path, merged=False, freshness_year=marker)

    if not force and not needs_merge(output_path, marker, encoding=encoding):
        logger.info("%s is up to date (last year %s); merge skipped", output_path.name, marker)
        return result

    logger.info("Merging %d file(s) into %s", len(sources), output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_name(output_path.name + ".tmp")

    header_written = False
    try:
        with tmp_path.open("w", encoding=encoding, newline="") as out:
            w = csv.writer(out)
            for src in sources:
                try:
                    rows = _read_csv_rows(src, encoding)
                except UnicodeDecodeError as e:
                    logger.error("Skipping %s: not valid %s (%s); set --encoding", src.name, encoding, e.reason)
                    result.files_skipped.append(src.name)
                    continue
                except (OSError, csv.Error) as e:
                    logger.error("Skipping %s: %s", src.name, e)
                    result.files_skipped.append(src.name)
                    continue
                if not rows:
                    logger.warning("Skipping %s: empty file", src.name)
                    result.files_skipped.append(src.name)
                    continue
                if not header_written:
                    w.writerow(rows[0])
                    header_written = True
                w.writerows(rows[1:])
                result.rows_written += len(rows) - 1
                result.files_merged.append(src.name)
                logger.debug("%s: %d data rows", src.name, len(rows) - 1)
        if not header_written:
            logger.error("No readable source file in %s; %s left unchanged", source_dir, output_path.name)
            tmp_path.unlink()
            return result
        os.replace(tmp_path, output_path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise

    result.merged = True
    logger.info("Merged %d rows from %d file(s) into %s", result.rows_written, len(result.files_merged), output_path.name)
    return result
