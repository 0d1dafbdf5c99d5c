from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Optional, Sequence

import pytest

from focos.engine import FireEngine
from focos.loader import load_records
from focos.merger import merge_sources
from focos.models import ObservationDate, OccurrenceRecord
from focos.store import InMemoryStore

HEADER = [
    "ID_BDQ",
    "FOCO_ID",
    "LAT",
    "LON",
    "DATA",
    "PAIS",
    "ESTADO",
    "MUNICIPIO",
    "BIOMA",
]


def write_csv(path: Path, rows: Iterable[Sequence[str]], header: Optional[Sequence[str]] = HEADER,
              encoding: str = "utf-8") -> Path:
    with path.open("w", newline="", encoding=encoding) as handle:
        writer = csv.writer(handle)
        if header is not None:
            writer.writerow(header)
        writer.writerows(rows)
    return path


def row(date: str, *, municipality: str = "ALTAMIRA", biome: str = "Amazonia",
        lat: str = "-3.2", lon: str = "-52.2", country: str = "Brasil", state: str = "PARA") -> list[str]:
    return ["1", "f1", lat, lon, date, country, state, municipality, biome]


def make_record(year: int, month: Optional[int] = None, day: Optional[int] = None, *,
                biome: Optional[str] = "Amazonia", municipality: Optional[str] = "ALTAMIRA") -> OccurrenceRecord:
    return OccurrenceRecord(
        source_id="1",
        focus_id="f1",
        latitude=-3.2,
        longitude=-52.2,
        country="Brasil",
        state="PARA",
        municipality=municipality,
        biome=biome,
        date=ObservationDate(year, month, day),
    )


@pytest.fixture()
def yearly_dir(tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    write_csv(
        data_dir / "focos_2003.csv",
        [
            row("2003-01-10 14:30:00", municipality="ALTAMIRA", biome="Amazonia"),
            row("15/07/2003", municipality="SORRISO", biome="Cerrado"),
        ],
    )
    write_csv(
        data_dir / "focos_2004.csv",
        [
            row("2004-02-01", municipality="ALTAMIRA", biome="Amazonia"),
            row("2004/08/20", municipality="ALTAMIRA", biome="Cerrado"),
            row("2004", municipality="", biome=""),
        ],
    )
    return data_dir


@pytest.fixture()
def loaded_engine(yearly_dir: Path) -> FireEngine:
    merged = yearly_dir / "focos_merged.csv"
    merge_sources(yearly_dir, merged)
    store = InMemoryStore()
    load_records(merged, store)
    return FireEngine(store=store, dataset_path=str(merged))
