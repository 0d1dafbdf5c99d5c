"""
Aggregations
============

Pure functions over a snapshot of records. Nothing is cached: each call
scans the records it is given. That is fine for yearly files and keeps
every function easy to test with a hand-made list of records.

Ordering rules:
- year and month mappings are ascending by key
- biome mappings are alphabetical
- season mappings follow SEASONS (Summer, Autumn, Winter, Spring)
- municipality rankings are by count descending, then name ascending
"""

from __future__ import annotations
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional

from .dsa import quick_sort, rank_by_count
from .models import OccurrenceRecord, SEASONS


def years_ascending(records: Iterable[OccurrenceRecord]) -> List[int]:
    """Distinct years present, ascending."""
    return quick_sort(list({r.date.year for r in records}))


def count_by_year(records: Iterable[OccurrenceRecord]) -> Dict[int, int]:
    c = Counter(r.date.year for r in records)
    return {y: c[y] for y in quick_sort(list(c))}


def biomes_alphabetical(records: Iterable[OccurrenceRecord]) -> List[str]:
    """Distinct biome names (records without a biome are ignored)."""
    return quick_sort(list({r.biome for r in records if r.biome}))


def count_by_biome(records: Iterable[OccurrenceRecord]) -> Dict[str, int]:
    c = Counter(r.biome for r in records if r.biome)
    return {b: c[b] for b in quick_sort(list(c))}


def count_by_month(records: Iterable[OccurrenceRecord]) -> Dict[int, int]:
    """Counts per month 1-12. Year-only dates have no month and are left out."""
    c = Counter(r.date.month for r in records if r.date.month is not None)
    return {m: c[m] for m in quick_sort(list(c))}


def count_by_season(records: Iterable[OccurrenceRecord]) -> Dict[str, int]:
    """Counts per Southern-Hemisphere season, only seasons that occur."""
    c = Counter(r.season for r in records if r.season is not None)
    return {s: c[s] for s in SEASONS if c[s] > 0}


def season_with_most_occurrences(records: Iterable[OccurrenceRecord]) -> Optional[str]:
    """Season with the highest count; on a tie the first one in SEASONS order wins."""
    best: Optional[str] = None
    best_count = 0
    for season, n in count_by_season(records).items():
        if n > best_count:
            best, best_count = season, n
    return best


def growth_percent_from_counts(counts: Mapping[int, int]) -> Dict[int, float]:
    """Percent change of each year against the previous year present.

    The first year has no previous year and is never a key. A previous count
    of 0 gives a growth of 0.
    """
    years = quick_sort(list(counts))
    out: Dict[int, float] = {}
    for prev, year in zip(years, years[1:]):
        before, now = counts[prev], counts[year]
        pct = (now - before) / before * 100.0 if before > 0 else 0.0
        out[year] = round(pct, 2)
    return out


def growth_percent_by_year(records: Iterable[OccurrenceRecord]) -> Dict[int, float]:
    return growth_percent_from_counts(count_by_year(records))


def overall_change_percent(counts: Mapping[int, int]) -> float:
    """Percent change between the first and the last year (0 if not computable)."""
    if len(counts) < 2:
        return 0.0
    years = quick_sort(list(counts))
    first, last = counts[years[0]], counts[years[-1]]
    if first == 0:
        return 0.0
    return round((last - first) / first * 100.0, 2)


def count_by_municipality(records: Iterable[OccurrenceRecord]) -> Dict[str, int]:
    return dict(Counter(r.municipality.strip() for r in records
                        if r.municipality and r.municipality.strip()))


def top_municipalities(records: Iterable[OccurrenceRecord], n: int) -> Dict[str, int]:
    """The `n` municipalities with most occurrences (blank names excluded)."""
    return rank_by_count(count_by_municipality(records), n)
