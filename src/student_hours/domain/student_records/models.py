"""
Models for the student record search.

Result-side types are frozen dataclasses: a search hands them to the caller and
never touches them again.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional


@dataclass(frozen=True)
class FileDescriptor:
    """A workbook found during directory traversal."""

    full_path: Path
    file_name: str
    relative_path: Path
    folder_path: Path


@dataclass(frozen=True)
class Period:
    """Year and month a workbook is deemed to represent.

    Attributes:
        year: Four-digit year ("" if unknown)
        month: Zero-padded month ("" if unknown)
    """

    year: str
    month: str

    @property
    def key(self) -> str:
        """Sortable grouping key, e.g. ``"2024-03"``."""
        return f"{self.year}-{self.month}"


@dataclass
class SheetFrame:
    """Rectangular text grid of one worksheet.

    ``headers`` is the sheet's first non-blank row (trimmed); ``rows`` are the
    rows below it, each padded to the same width with empty strings.
    ``header_row`` is the 0-based sheet row the headers were read from.
    """

    sheet_name: str
    headers: List[str]
    rows: List[List[str]]
    header_row: int = 0

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class ColumnLayout:
    """Column roles located in a sheet's header row.

    Attributes:
        identifier_index: Column holding the student code (-1 if not found)
        category_a_index: Co-curricular sentinel column, if present
        category_b_index: Leadership sentinel column, if present
        column_count: Width of the header row
    """

    identifier_index: int
    category_a_index: Optional[int]
    category_b_index: Optional[int]
    column_count: int

    @property
    def has_identifier(self) -> bool:
        return self.identifier_index != -1

    @property
    def is_inverted(self) -> bool:
        """Both sentinels present with the leadership one first."""
        return (
            self.category_a_index is not None
            and self.category_b_index is not None
            and self.category_b_index < self.category_a_index
        )

    def category_a_columns(self) -> range:
        if self.category_a_index is None:
            return range(0)
        if self.category_b_index is not None:
            return range(self.category_a_index, self.category_b_index)
        return range(self.category_a_index, self.column_count)

    def category_b_columns(self) -> range:
        if self.category_b_index is None:
            return range(0)
        return range(self.category_b_index, self.column_count)


@dataclass(frozen=True)
class SearchResult:
    """One data row matching the searched identifier."""

    file: str
    file_path: str
    sheet: str
    period: Period
    row_index: int  # 1-based over data rows (header excluded)
    cocurriculares: Dict[str, str] = field(default_factory=dict)
    liderazgo: Dict[str, str] = field(default_factory=dict)

    @property
    def year(self) -> str:
        return self.period.year

    @property
    def month(self) -> str:
        return self.period.month

    def to_dict(self) -> Dict[str, Any]:
        """Render the result in the shape consumed by the display layer."""
        return {
            "file": self.file,
            "filePath": self.file_path,
            "sheet": self.sheet,
            "year": self.year,
            "month": self.month,
            "rowIndex": self.row_index,
            "data": {
                "cocurriculares": dict(self.cocurriculares),
                "liderazgo": dict(self.liderazgo),
            },
        }


@dataclass(frozen=True)
class ScanFailure:
    """A file or sheet that contributed no results because it failed."""

    scope: Literal["file", "sheet"]
    file_path: str
    reason: str
    sheet_name: Optional[str] = None


@dataclass
class FileScanResult:
    """Accumulator for one workbook: matches plus sheet-level failures."""

    file_path: str
    results: List[SearchResult] = field(default_factory=list)
    failures: List[ScanFailure] = field(default_factory=list)
    sheets_scanned: int = 0


@dataclass
class SearchReport:
    """Outcome of a full search: results and the side log of failures."""

    root_path: str
    identifier: str
    files_discovered: int = 0
    files_scanned: int = 0
    results: List[SearchResult] = field(default_factory=list)
    failures: List[ScanFailure] = field(default_factory=list)

    def merge(self, file_result: FileScanResult) -> None:
        self.results.extend(file_result.results)
        self.failures.extend(file_result.failures)
        self.files_scanned += 1
