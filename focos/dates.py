"""
Date parsing
============

Source files written over the years use different date layouts. We try,
in order:

1. a bare year ("2003")                -> year-only date
2. "2003-05-15 13:45:00"
3. "2003-05-15"
4. "15/05/2003"
5. "2003/05/15"
6. the part before the first space, as "2003-05-15"
7. the first four characters, if they are digits -> year-only date

If nothing matches, `UnparseableDate` is raised. The loader drops the row.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional
import re

from .errors import UnparseableDate
from .models import ObservationDate

DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%Y/%m/%d",
)

_YEAR_ONLY_RE = re.compile(r"^[0-9]{4}$")
_LEADING_YEAR_RE = re.compile(r"^([0-9]{4})")


def _try_format(s: str, fmt: str) -> Optional[ObservationDate]:
    try:
        d = datetime.strptime(s, fmt)
    except ValueError:
        return None
    return ObservationDate(d.year, d.month, d.day)


def parse_date(raw: Optional[str]) -> ObservationDate:
    """Parse a raw date string into an `ObservationDate`."""
    if raw is None:
        raise UnparseableDate(raw)
    s = str(raw).strip()
    if not s:
        raise UnparseableDate(raw)

    if _YEAR_ONLY_RE.match(s):
        return ObservationDate(int(s))

    for fmt in DATE_FORMATS:
        d = _try_format(s, fmt)
        if d is not None:
            return d

    # e.g. "2003-05-15 00:00" or "2003-05-15 12:00:00 UTC"
    if " " in s:
        d = _try_format(s.split(" ", 1)[0], "%Y-%m-%d")
        if d is not None:
            return d

    m = _LEADING_YEAR_RE.match(s)
    if m:
        return ObservationDate(int(m.group(1)))

    raise UnparseableDate(raw)


def parse_year(raw: Optional[str]) -> Optional[int]:
    """Return the year of a raw date, or None if it cannot be parsed."""
    try:
        return parse_date(raw).year
    except UnparseableDate:
        return None
