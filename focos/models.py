"""
Data model (OccurrenceRecord)
=============================

Each data row of the merged CSV is converted into an `OccurrenceRecord`.
We keep it immutable (`frozen=True`) so that:
- records cannot be modified after loading, and
- aggregations only read records, they never edit them.

Dates are stored as `ObservationDate`. Some source files only carry the
year, so month and day are optional (a "year-only" date). Year-only dates
are never turned into 1 January: that would push them all into the
January/Summer buckets of the month and season counts.
"""

from dataclasses import dataclass
from typing import Optional

# Southern-Hemisphere seasons, in the order they are reported.
SEASONS = ("Summer", "Autumn", "Winter", "Spring")

_SEASON_BY_MONTH = {
    12: "Summer", 1: "Summer", 2: "Summer",
    3: "Autumn", 4: "Autumn", 5: "Autumn",
    6: "Winter", 7: "Winter", 8: "Winter",
    9: "Spring", 10: "Spring", 11: "Spring",
}


def season_of(month: int) -> str:
    """Return the season name for a month number (1-12)."""
    return _SEASON_BY_MONTH[month]


@dataclass(frozen=True)
class ObservationDate:
    """A calendar date, or only a year when the source lacks precision."""
    year: int
    month: Optional[int] = None
    day: Optional[int] = None

    @property
    def is_year_only(self) -> bool:
        return self.month is None

    def sort_key(self) -> int:
        """Return an integer YYYYMMDD key (unknown parts count as 0)."""
        return self.year * 10000 + (self.month or 0) * 100 + (self.day or 0)

    def isoformat(self) -> str:
        if self.month is None:
            return f"{self.year:04d}"
        if self.day is None:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class OccurrenceRecord:
    """One fire/deforestation occurrence.

    `source_id` and `focus_id` are opaque identifiers from the source data;
    they are not unique keys here.
    """
    source_id: str
    focus_id: str
    latitude: float
    longitude: float
    country: Optional[str]
    state: Optional[str]
    municipality: Optional[str]
    biome: Optional[str]
    date: ObservationDate

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def season(self) -> Optional[str]:
        if self.date.month is None:
            return None
        return season_of(self.date.month)
