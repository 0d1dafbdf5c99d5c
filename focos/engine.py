"""
Core engine (FOCOS)
===================

The engine is a thin facade between a record store and the pure
aggregation / trend functions:

1) The loader fills a `RecordStore` once at startup
2) Every query takes a fresh snapshot with `store.find_all()`
3) The snapshot is handed to `aggregate` / `trend` functions
4) Results are plain dicts, ready to print, export or serve

The engine itself never writes to the store, so any number of callers may
query it at the same time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
import csv
import json

from . import aggregate, trend
from .models import OccurrenceRecord
from .store import RecordStore

# view name -> (column headers, function computing the mapping)
VIEWS: Dict[str, Tuple[Tuple[str, str], Callable[["FireEngine"], Dict[Any, Any]]]] = {
    "years": (("year", "count"), lambda e: e.count_by_year()),
    "biomes": (("biome", "count"), lambda e: e.count_by_biome()),
    "months": (("month", "count"), lambda e: e.count_by_month()),
    "seasons": (("season", "count"), lambda e: e.count_by_season()),
    "growth": (("year", "growth_percent"), lambda e: e.growth_percent_by_year()),
    "municipalities": (("municipality", "count"), lambda e: e.top_municipalities(10)),
}


@dataclass
class FireEngine:
    """Query facade over the loaded fire occurrence records."""
    store: RecordStore
    dataset_path: Optional[str] = None
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)

    def records(self) -> Tuple[OccurrenceRecord, ...]:
        return self.store.find_all()

    def size(self) -> int:
        return self.store.count()

    # ---------------- Aggregations ----------------
    def years(self) -> List[int]:
        return aggregate.years_ascending(self.records())

    def count_by_year(self) -> Dict[int, int]:
        return aggregate.count_by_year(self.records())

    def biomes(self) -> List[str]:
        return aggregate.biomes_alphabetical(self.records())

    def count_by_biome(self) -> Dict[str, int]:
        return aggregate.count_by_biome(self.records())

    def count_by_month(self) -> Dict[int, int]:
        return aggregate.count_by_month(self.records())

    def count_by_season(self) -> Dict[str, int]:
        return aggregate.count_by_season(self.records())

    def peak_season(self) -> Optional[str]:
        return aggregate.season_with_most_occurrences(self.records())

    def growth_percent_by_year(self) -> Dict[int, float]:
        return aggregate.growth_percent_by_year(self.records())

    def overall_change_percent(self) -> float:
        return aggregate.overall_change_percent(self.count_by_year())

    def top_municipalities(self, n: int) -> Dict[str, int]:
        return aggregate.top_municipalities(self.records(), n)

    # ---------------- Trend ----------------
    def trend(self) -> trend.Forecast:
        """Next-year forecast. Raises InsufficientData with < 2 years."""
        return trend.forecast_next_year(self.count_by_year())

    def forecast(self, k: int) -> Dict[int, trend.RangeForecast]:
        return trend.forecast_range(self.count_by_year(), k)

    def fit(self) -> trend.TrendFit:
        return trend.fit_trend(self.count_by_year())

    # ---------------- Output operations ----------------
    def view(self, name: str) -> Tuple[Tuple[str, str], Dict[Any, Any]]:
        """Return (headers, mapping) for a named view."""
        key = name.lower().strip()
        if key not in VIEWS:
            raise ValueError(f"view must be one of: {', '.join(VIEWS)}")
        headers, compute = VIEWS[key]
        return headers, compute(self)

    def export_csv(self, view: str, path: str) -> None:
        headers, data = self.view(view)
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(headers)
            for k, v in data.items():
                w.writerow([k, v])

    def export_json(self, view: str, path: str) -> None:
        """Export a view to a JSON file.

        Keys become strings in JSON; the list of objects keeps them typed.
        """
        headers, data = self.view(view)
        payload = [{headers[0]: k, headers[1]: v} for k, v in data.items()]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
