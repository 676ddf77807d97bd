"""Student record search domain.

Models and constants are imported eagerly; the scanner and service load on
first access so that configuration and I/O modules can depend on the models
without import cycles.
"""

from __future__ import annotations

import importlib
from typing import Any

from .constants import CATEGORY_A, CATEGORY_B
from .models import (
    ColumnLayout,
    FileDescriptor,
    FileScanResult,
    Period,
    ScanFailure,
    SearchReport,
    SearchResult,
    SheetFrame,
)

__all__ = [
    "CATEGORY_A",
    "CATEGORY_B",
    "ColumnLayout",
    "FileDescriptor",
    "FileScanResult",
    "Period",
    "ScanFailure",
    "SearchReport",
    "SearchResult",
    "SheetFrame",
    "StudentRecordSearch",
    "WorkbookScanner",
    "search_student",
    "select_root",
    "group_by_period",
    "summarize_hours",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "StudentRecordSearch": (".service", "StudentRecordSearch"),
    "search_student": (".service", "search_student"),
    "select_root": (".service", "select_root"),
    "WorkbookScanner": (".scanner", "WorkbookScanner"),
    "group_by_period": (".aggregation", "group_by_period"),
    "summarize_hours": (".aggregation", "summarize_hours"),
}


def __getattr__(name: str) -> Any:
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _LAZY_IMPORTS[name]
    module = importlib.import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
