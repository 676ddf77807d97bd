"""Workbook readers."""

from .excel_reader import (
    ExcelReader,
    LoadedSheet,
    LoadedWorkbook,
    WorkbookOpenResult,
    build_sheet_frame,
    cell_to_text,
)

__all__ = [
    "ExcelReader",
    "LoadedSheet",
    "LoadedWorkbook",
    "WorkbookOpenResult",
    "build_sheet_frame",
    "cell_to_text",
]
