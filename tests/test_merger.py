from __future__ import annotations

import csv
from pathlib import Path

import pytest

from conftest import HEADER, row, write_csv
from focos.errors import NoSourceFiles
from focos.merger import (
    freshness_marker,
    last_row_year,
    list_source_files,
    merge_sources,
    needs_merge,
    year_from_filename,
)


def read_rows(path: Path):
    with path.open(newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_year_from_filename():
    assert year_from_filename("focos_2003.csv") == 2003
    assert year_from_filename("focos_2003_2005.csv") == 2005
    assert year_from_filename("focos_1999.csv") is None
    assert year_from_filename("focos.csv") is None


def test_freshness_marker_uses_max_year():
    assert freshness_marker([Path("a_2004.csv"), Path("b_2010.csv"), Path("c.csv")]) == 2010
    assert freshness_marker([Path("c.csv")]) is None


def test_list_source_files_sorted_and_excludes_output(yearly_dir: Path):
    write_csv(yearly_dir / "focos_2002.csv", [row("2002-01-01")])
    output = yearly_dir / "focos_merged.csv"
    output.write_text("x\n")
    names = [p.name for p in list_source_files(yearly_dir, output)]
    assert names == ["focos_2002.csv", "focos_2003.csv", "focos_2004.csv"]


def test_merge_writes_header_once_and_rows_in_file_order(yearly_dir: Path, tmp_path: Path):
    output = tmp_path / "out" / "merged.csv"
    result = merge_sources(yearly_dir, output)

    assert result.merged
    assert result.freshness_year == 2004
    assert result.files_merged == ["focos_2003.csv", "focos_2004.csv"]
    assert result.rows_written == 5

    rows = read_rows(output)
    assert rows[0] == HEADER
    assert sum(1 for r in rows if r == HEADER) == 1
    assert [r[4] for r in rows[1:]] == [
        "2003-01-10 14:30:00",
        "15/07/2003",
        "2004-02-01",
        "2004/08/20",
        "2004",
    ]


def test_second_merge_with_unchanged_inputs_is_skipped(yearly_dir: Path):
    output = yearly_dir / "focos_merged.csv"
    first = merge_sources(yearly_dir, output)
    assert first.merged
    assert last_row_year(output) == 2004

    before = output.read_bytes()
    second = merge_sources(yearly_dir, output)
    assert not second.merged
    assert second.rows_written == 0
    assert output.read_bytes() == before


def test_new_year_file_triggers_remerge(yearly_dir: Path):
    output = yearly_dir / "focos_merged.csv"
    merge_sources(yearly_dir, output)

    write_csv(yearly_dir / "focos_2005.csv", [row("2005-03-03")])
    assert needs_merge(output, 2005)

    result = merge_sources(yearly_dir, output)
    assert result.merged
    assert result.rows_written == 6
    assert last_row_year(output) == 2005


def test_force_remerges(yearly_dir: Path):
    output = yearly_dir / "focos_merged.csv"
    merge_sources(yearly_dir, output)
    assert merge_sources(yearly_dir, output, force=True).merged


def test_empty_file_is_skipped_not_fatal(yearly_dir: Path, tmp_path: Path):
    (yearly_dir / "focos_2001.csv").write_text("")
    output = tmp_path / "merged.csv"
    result = merge_sources(yearly_dir, output)
    assert result.files_skipped == ["focos_2001.csv"]
    assert read_rows(output)[0] == HEADER
    assert result.rows_written == 5


def test_no_source_files_raises(tmp_path: Path):
    with pytest.raises(NoSourceFiles):
        merge_sources(tmp_path, tmp_path / "merged.csv")


def test_last_row_year_missing_file(tmp_path: Path):
    assert last_row_year(tmp_path / "nope.csv") is None
    assert needs_merge(tmp_path / "nope.csv", 2004)


def test_unparseable_last_row_forces_remerge(yearly_dir: Path):
    output = yearly_dir / "focos_merged.csv"
    write_csv(output, [row("garbage")])
    assert last_row_year(output) is None
    assert merge_sources(yearly_dir, output).merged


def test_source_in_wrong_encoding_is_skipped(yearly_dir: Path, caplog):
    write_csv(yearly_dir / "focos_2005.csv", [row("2005-03-01", municipality="SÃO FÉLIX DO XINGU")],
              encoding="latin-1")
    merged = yearly_dir / "focos_merged.csv"

    result = merge_sources(yearly_dir, merged)

    assert result.merged
    assert result.files_skipped == ["focos_2005.csv"]
    assert result.files_merged == ["focos_2003.csv", "focos_2004.csv"]
    assert result.rows_written == 5
    assert "�" not in merged.read_text(encoding="utf-8")
    assert "--encoding" in caplog.text


def test_source_encoding_is_configurable(tmp_path: Path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    write_csv(data_dir / "focos_2005.csv", [row("2005-03-01", municipality="SÃO FÉLIX DO XINGU")],
              encoding="latin-1")
    merged = data_dir / "focos_merged.csv"

    result = merge_sources(data_dir, merged, encoding="latin-1")

    assert result.files_skipped == []
    with merged.open(newline="", encoding="latin-1") as handle:
        rows = list(csv.reader(handle))
    assert rows[1][7] == "SÃO FÉLIX DO XINGU"
    assert last_row_year(merged, encoding="latin-1") == 2005


def test_failed_write_leaves_no_temp_file(yearly_dir: Path, monkeypatch):
    merged = yearly_dir / "focos_merged.csv"
    merge_sources(yearly_dir, merged)
    before = merged.read_bytes()
    write_csv(yearly_dir / "focos_2005.csv", [row("2005-03-01")])

    def disk_full(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("focos.merger.os.replace", disk_full)
    with pytest.raises(OSError):
        merge_sources(yearly_dir, merged)

    assert not (yearly_dir / "focos_merged.csv.tmp").exists()
    assert merged.read_bytes() == before


def test_extension_match_ignores_case(tmp_path: Path):
    write_csv(tmp_path / "FOCOS_2005.CSV", [row("2005-03-01")])
    (tmp_path / "notes.txt").write_text("not data", encoding="utf-8")
    assert [p.name for p in list_source_files(tmp_path)] == ["FOCOS_2005.CSV"]


def test_missing_source_dir(tmp_path: Path):
    assert list_source_files(tmp_path / "nowhere") == []
    with pytest.raises(NoSourceFiles):
        merge_sources(tmp_path / "nowhere", tmp_path / "merged.csv")
