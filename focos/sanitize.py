"""
Row sanitizing (raw CSV row -> OccurrenceRecord)
================================================

Expected columns (by position, header names vary between years):

    0 source id | 1 focus id | 2 latitude | 3 longitude | 4 date
    5 country   | 6 state    | 7 municipality | 8 biome

Key ideas:
- Every field is trimmed before use.
- Coordinates may use a comma as decimal separator ("-10,5").
- (0, 0) is how some exports mark "no position"; it is rejected.
- The Brazil bounding box check (with a 2 degree margin) only runs in
  strict mode.
"""

from __future__ import annotations
from typing import Optional, Sequence, List
import math

from .dates import parse_date
from .errors import InvalidCoordinate, MalformedRow
from .models import OccurrenceRecord

MIN_COLUMNS = 9

COL_SOURCE_ID = 0
COL_FOCUS_ID = 1
COL_LATITUDE = 2
COL_LONGITUDE = 3
COL_DATE = 4
COL_COUNTRY = 5
COL_STATE = 6
COL_MUNICIPALITY = 7
COL_BIOME = 8

# (lat_min, lat_max, lon_min, lon_max), real bounding box +/- 2 degrees
BRAZIL_BOUNDS = (-35.0, 7.0, -76.0, -26.0)
_BRAZIL_NAMES = ("brazil", "brasil")


def _to_str(x) -> str:
    if x is None:
        return ""
    return str(x).strip()


def _blank_to_none(s: str) -> Optional[str]:
    return s if s else None


def clean_row(row: Sequence[object]) -> List[str]:
    """Trim every field and check the row is wide enough."""
    if row is None or len(row) < MIN_COLUMNS:
        raise MalformedRow(0 if row is None else len(row), MIN_COLUMNS)
    return [_to_str(x) for x in row]


def parse_coordinate(raw: object, axis: str = "coordinate") -> float:
    """Parse a latitude/longitude cell into a finite float."""
    s = _to_str(raw).replace(",", ".")
    if not s:
        raise InvalidCoordinate(f"Empty {axis}", value=raw)
    try:
        v = float(s)
    except ValueError:
        raise InvalidCoordinate(f"Non-numeric {axis}: {raw!r}", value=raw) from None
    if not math.isfinite(v):
        raise InvalidCoordinate(f"Non-finite {axis}: {raw!r}", value=raw)
    return v


def is_brazil(country: Optional[str]) -> bool:
    return bool(country) and country.strip().lower() in _BRAZIL_NAMES


def validate_coordinates(lat: float, lon: float, country: Optional[str] = None, *, strict: bool = False) -> None:
    """Raise `InvalidCoordinate` if (lat, lon) is not a usable position."""
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"Latitude out of range: {lat}", value=lat)
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"Longitude out of range: {lon}", value=lon)
    if lat == 0.0 and lon == 0.0:
        raise InvalidCoordinate("Coordinate (0, 0) marks missing position", value=(lat, lon))
    if strict and is_brazil(country):
        lat_min, lat_max, lon_min, lon_max = BRAZIL_BOUNDS
        if not (lat_min <= lat <= lat_max and lon_min <= lon <= lon_max):
            raise InvalidCoordinate(f"Coordinate ({lat}, {lon}) outside Brazil bounds", value=(lat, lon))


def record_from_row(row: Sequence[object], *, strict: bool = False) -> OccurrenceRecord:
    """Validate one raw row and build an `OccurrenceRecord`.

    Raises:
        MalformedRow, InvalidCoordinate, UnparseableDate
    """
    cells = clean_row(row)
    lat = parse_coordinate(cells[COL_LATITUDE], "latitude")
    lon = parse_coordinate(cells[COL_LONGITUDE], "longitude")
    country = _blank_to_none(cells[COL_COUNTRY])
    validate_coordinates(lat, lon, country, strict=strict)
    date = parse_date(cells[COL_DATE])

    return OccurrenceRecord(
        source_id=cells[COL_SOURCE_ID],
        focus_id=cells[COL_FOCUS_ID],
        latitude=lat,
        longitude=lon,
        country=country,
        state=_blank_to_none(cells[COL_STATE]),
        municipality=_blank_to_none(cells[COL_MUNICIPALITY]),
        biome=_blank_to_none(cells[COL_BIOME]),
        date=date,
    )
