"""Startup ingestion: merge-if-stale, then load-if-empty."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import IngestConfig
from .errors import NoSourceFiles
from .loader import LoadReport, load_records, reload_records
from .merger import MergeResult, merge_sources
from .store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class IngestionSummary:
    """Outcome of one ingestion run."""

    merge: Optional[MergeResult]
    load: LoadReport
    # set when writing the merged file failed
    merge_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.load.already_loaded or self.load.records_saved > 0

    def lines(self) -> list[str]:
        out = []
        if self.merge_error:
            out.append(f"Merge: failed ({self.merge_error}); existing merged file used if present.")
        elif self.merge is None:
            out.append("Merge: no source files found.")
        elif self.merge.merged:
            out.append(
                f"Merge: {self.merge.rows_written} rows from {len(self.merge.files_merged)} file(s)"
                + (f", {len(self.merge.files_skipped)} skipped" if self.merge.files_skipped else "")
                + "."
            )
        else:
            out.append(f"Merge: up to date (latest year {self.merge.freshness_year}).")
        out.append("Load: " + self.load.summary())
        return out


def run_ingestion(config: IngestConfig, store: RecordStore, *, reload: bool = False) -> IngestionSummary:
    """Run the merge and load steps. Never raises for data or file problems."""
    logger.info("Starting ingestion from %s", config.data_dir)
    merge: Optional[MergeResult]
    merge_error: Optional[str] = None
    try:
        merge = merge_sources(config.data_dir, config.merged_path, encoding=config.encoding)
    except NoSourceFiles as e:
        # an existing merged file is still usable
        logger.error("%s", e)
        merge = None
    except OSError as e:
        logger.error("Could not write %s: %s", config.merged_path, e)
        merge = None
        merge_error = str(e)

    load_fn = reload_records if reload else load_records
    report = load_fn(config.merged_path, store, strict=config.strict_bounds, encoding=config.encoding)

    summary = IngestionSummary(merge=merge, load=report, merge_error=merge_error)
    for line in summary.lines():
        logger.info(line)
    return summary
