"""Integration tests for the search command line."""

import json

import pytest

from student_hours.cli.__main__ import main

HEADERS = ["COD", "Nombre", "Revisiones pendientes cocurriculares", "Taller X",
           "Revisiones pendientes liderazgo", "Taller Y"]


@pytest.fixture
def report_root(tmp_path, make_workbook):
    root = tmp_path / "reportes"
    make_workbook(
        root / "2024" / "03. Marzo" / "Reporte.xlsx",
        [("Hoja1", [HEADERS, ["12345", "Ana", "", 3, "", 2]])],
    )
    make_workbook(
        root / "2023" / "11. Noviembre" / "Reporte.xlsx",
        [("Hoja1", [HEADERS, ["12345", "Ana", "", 1.5, "", ""]])],
    )
    return root


@pytest.mark.integration
def test_json_output(report_root, capsys):
    exit_code = main(["search", "--root", str(report_root), "--id", "12345", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert sorted((r["year"], r["month"]) for r in payload) == [("2023", "11"), ("2024", "03")]
    march = next(r for r in payload if r["month"] == "03")
    assert march["data"] == {"cocurriculares": {"Taller X": "3"}, "liderazgo": {"Taller Y": "2"}}
    assert march["rowIndex"] == 1


@pytest.mark.integration
def test_json_output_with_summary(report_root, capsys):
    exit_code = main(
        ["search", "--root", str(report_root), "--id", "12345", "--json", "--summary"]
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["results"]) == 2
    assert payload["summary"] == {
        "2024-03": {"cocurriculares": 3.0, "liderazgo": 2.0},
        "2023-11": {"cocurriculares": 1.5, "liderazgo": 0},
    }


@pytest.mark.integration
def test_human_listing_newest_first(report_root, capsys):
    exit_code = main(["search", "--root", str(report_root), "--id", "12345", "--summary"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert out.index("== 2024-03 ==") < out.index("== 2023-11 ==")
    assert "Taller X: 3" in out
    assert "2023-11  cocurriculares=1.50  liderazgo=0" in out


@pytest.mark.integration
def test_no_records_is_not_an_error(report_root, capsys):
    exit_code = main(["search", "--root", str(report_root), "--id", "99999"])

    assert exit_code == 0
    assert "No records found for '99999'." in capsys.readouterr().out


@pytest.mark.integration
def test_missing_folder_exits_with_error(tmp_path, capsys):
    exit_code = main(["search", "--root", str(tmp_path / "nada"), "--id", "12345"])

    assert exit_code == 1
    assert "Folder does not exist" in capsys.readouterr().err


@pytest.mark.integration
def test_folder_without_workbooks_exits_with_error(tmp_path, capsys):
    exit_code = main(["search", "--root", str(tmp_path), "--id", "12345"])

    assert exit_code == 1
    assert "No Excel files found" in capsys.readouterr().err


@pytest.mark.integration
def test_default_root_from_environment(report_root, monkeypatch, capsys):
    monkeypatch.setenv("SHF_DEFAULT_ROOT", str(report_root))

    exit_code = main(["search", "--id", "12345", "--json"])

    assert exit_code == 0
    assert len(json.loads(capsys.readouterr().out)) == 2


@pytest.mark.integration
def test_no_root_at_all(capsys):
    exit_code = main(["search", "--id", "12345"])

    assert exit_code == 1
    assert "no folder given" in capsys.readouterr().err
