"""Connectors for locating workbooks on disk."""

from .exceptions import (
    SearchError,
    SearchInputError,
    SearchStage,
    SheetLayoutError,
    SheetReadError,
    WorkbookFileError,
)
from .file_discovery import FileDiscovery, discover_excel_files

__all__ = [
    "SearchError",
    "SearchInputError",
    "SearchStage",
    "SheetLayoutError",
    "SheetReadError",
    "WorkbookFileError",
    "FileDiscovery",
    "discover_excel_files",
]
