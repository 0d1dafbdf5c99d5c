from __future__ import annotations

import csv
import json

import pytest

from conftest import make_record
from focos.engine import FireEngine
from focos.errors import InsufficientData
from focos.store import InMemoryStore


def test_engine_aggregations(loaded_engine: FireEngine):
    e = loaded_engine
    assert e.size() == 5
    assert e.years() == [2003, 2004]
    assert e.count_by_year() == {2003: 2, 2004: 3}
    assert e.biomes() == ["Amazonia", "Cerrado"]
    assert e.count_by_biome() == {"Amazonia": 2, "Cerrado": 2}
    assert e.count_by_month() == {1: 1, 2: 1, 7: 1, 8: 1}
    assert e.count_by_season() == {"Summer": 2, "Winter": 2}
    assert e.peak_season() == "Summer"
    assert e.growth_percent_by_year() == {2004: 50.0}
    assert e.overall_change_percent() == 50.0
    assert e.top_municipalities(5) == {"ALTAMIRA": 3, "SORRISO": 1}


def test_engine_trend(loaded_engine: FireEngine):
    f = loaded_engine.trend()
    assert (f.year, f.predicted_value, f.trend_label) == (2005, 4, "INCREASING")
    assert list(loaded_engine.forecast(2)) == [2005, 2006]


def test_engine_trend_needs_two_years():
    e = FireEngine(store=InMemoryStore([make_record(2003, 1, 1)]))
    with pytest.raises(InsufficientData):
        e.trend()


def test_queries_do_not_write(loaded_engine: FireEngine):
    before = loaded_engine.records()
    loaded_engine.count_by_season()
    loaded_engine.top_municipalities(3)
    assert loaded_engine.records() == before
    assert loaded_engine.store.save_calls == 1


def test_unknown_view():
    with pytest.raises(ValueError):
        FireEngine(store=InMemoryStore()).view("nope")


def test_export_csv(loaded_engine: FireEngine, tmp_path):
    out = tmp_path / "years.csv"
    loaded_engine.export_csv("years", str(out))
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [["year", "count"], ["2003", "2"], ["2004", "3"]]


def test_export_json(loaded_engine: FireEngine, tmp_path):
    out = tmp_path / "seasons.json"
    loaded_engine.export_json("seasons", str(out))
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload == [{"season": "Summer", "count": 2}, {"season": "Winter", "count": 2}]
