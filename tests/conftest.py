"""Shared pytest fixtures: settings isolation and workbook builders."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

import pytest
from openpyxl import Workbook
from openpyxl.comments import Comment

from student_hours.config import get_settings

SETTINGS_ENV_VARS = (
    "LOG_LEVEL",
    "SHF_DEFAULT_ROOT",
    "SHF_MAX_FILE_SIZE_MB",
    "SHF_EXCLUDED_DIRS",
    "SHF_EXCEL_EXTENSIONS",
    "SHF_IDENTIFIER_ALIASES",
    "SHF_IGNORED_CELL_VALUES",
    "SHF_LOCK_FILE_MARKER",
    "SHF_CATEGORY_A_LABEL",
    "SHF_CATEGORY_B_LABEL",
    "SHF_PENDING_REVIEW_MARKER",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop SHF_* overrides from the environment and reset the settings cache."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


SheetSpec = Tuple[str, Sequence[Sequence[Any]]]


def write_workbook(
    path: Path,
    sheets: Iterable[SheetSpec],
    comments: Optional[Dict[Tuple[str, str], str]] = None,
) -> Path:
    """
    Save an .xlsx with the given sheets.

    Args:
        path: Target file; parent folders are created
        sheets: (sheet name, rows) pairs; the first row is the header row
        comments: {(sheet name, A1 address): text} cell comments
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    wb = Workbook()
    wb.remove(wb.active)
    for sheet_name, rows in sheets:
        ws = wb.create_sheet(title=sheet_name)
        for row in rows:
            ws.append(list(row))
    for (sheet_name, address), text in (comments or {}).items():
        wb[sheet_name][address].comment = Comment(text, "Docente")
    wb.save(path)
    return path


@pytest.fixture
def make_workbook():
    """Factory fixture around :func:`write_workbook`."""
    return write_workbook


HEADERS = [
    "COD",
    "Nombre",
    "Revisiones pendientes cocurriculares",
    "Taller X",
    "Revisiones pendientes liderazgo",
    "Taller Y",
]


@pytest.fixture
def hours_headers() -> list:
    return list(HEADERS)
