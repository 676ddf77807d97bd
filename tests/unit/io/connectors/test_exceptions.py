"""Unit tests for stage-marked search exceptions."""

import pytest

from student_hours.io.connectors.exceptions import (
    SearchError,
    SearchInputError,
    SearchStage,
    SheetLayoutError,
    SheetReadError,
    WorkbookFileError,
)


@pytest.mark.unit
def test_input_error_defaults_to_input_validation():
    error = SearchInputError("A folder to search is required")

    assert isinstance(error, SearchError)
    assert error.to_dict() == {
        "error_type": "SearchInputError",
        "failed_stage": "input_validation",
        "message": "A folder to search is required",
    }


@pytest.mark.unit
def test_input_error_with_discovery_stage():
    error = SearchInputError("No Excel files found", stage=SearchStage.FILE_DISCOVERY)

    assert error.to_dict()["failed_stage"] == "file_discovery"


@pytest.mark.unit
def test_workbook_error_carries_path_and_cause():
    cause = ValueError("bad zip")
    error = WorkbookFileError(
        "/data/a.xlsx",
        "Cannot parse Excel file",
        stage=SearchStage.WORKBOOK_OPEN,
        original_error=cause,
    )

    data = error.to_dict()
    assert data["file_path"] == "/data/a.xlsx"
    assert data["failed_stage"] == "workbook_open"
    assert data["original_error_type"] == "ValueError"
    assert data["original_error_message"] == "bad zip"


@pytest.mark.unit
def test_sheet_layout_error():
    error = SheetLayoutError("Hoja1", "Sentinel columns out of order")

    assert error.stage == SearchStage.SHEET_LAYOUT
    assert error.to_dict()["sheet_name"] == "Hoja1"
    assert str(error) == "Sentinel columns out of order"


@pytest.mark.unit
def test_sheet_read_error_carries_sheet_and_cause():
    cause = ValueError("celdas ilegibles")
    error = SheetReadError("Hoja1", "Cannot read sheet 'Hoja1'", original_error=cause)

    assert isinstance(error, SearchError)
    assert error.to_dict() == {
        "error_type": "SheetReadError",
        "failed_stage": "sheet_reading",
        "message": "Cannot read sheet 'Hoja1'",
        "original_error_type": "ValueError",
        "original_error_message": "celdas ilegibles",
        "sheet_name": "Hoja1",
    }
