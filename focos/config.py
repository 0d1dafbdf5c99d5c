"""Runtime configuration for the ingestion pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class IngestConfig:
    """Where the yearly files live and how they are read."""

    data_dir: Path = Path("data")
    merged_filename: str = "focos_merged.csv"
    merged_file: Optional[Path] = None
    encoding: str = "utf-8"
    strict_bounds: bool = False

    @property
    def merged_path(self) -> Path:
        """Path of the canonical merged dataset."""
        if self.merged_file is not None:
            return self.merged_file
        return self.data_dir / self.merged_filename

    def with_overrides(self, **changes) -> "IngestConfig":
        """Return a copy with every non-None value in `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls) -> "IngestConfig":
        merged = os.environ.get("FOCOS_MERGED_FILE")
        return cls(
            data_dir=Path(os.environ.get("FOCOS_DATA_DIR", str(cls.data_dir))),
            merged_file=Path(merged) if merged else None,
            encoding=os.environ.get("FOCOS_ENCODING", cls.encoding),
            strict_bounds=os.environ.get("FOCOS_STRICT_BOUNDS", "").strip().lower() in _TRUE_VALUES,
        )
