"""
Workbook reading infrastructure for Student Hours Finder.

This module opens legacy (.xls, via xlrd) and modern (.xlsx, via openpyxl)
workbooks behind one interface, turns each worksheet into a rectangular text
grid with pandas, and exposes cell comments/notes through
``get_annotation(column_index, row_index)`` so callers never deal with A1
addresses.

Opening is a two-step strategy: parse from the path, and when that fails read
the raw bytes and parse from an in-memory buffer. The outcome is returned as a
``WorkbookOpenResult`` rather than raised.
"""

import io
import math
import os
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

import openpyxl
import pandas as pd
import xlrd

from student_hours.config import get_settings
from student_hours.domain.student_records.models import SheetFrame
from student_hours.io.connectors.exceptions import SearchStage, WorkbookFileError
from student_hours.utils.logging import get_logger

logger = get_logger(__name__)

# openpyxl warns about unsupported styles/extensions; only values and comments are read
warnings.filterwarnings("ignore", category=UserWarning, module="openpyxl")

DATE_FORMAT = "%Y-%m-%d"

WorkbookSource = Union[str, Path, bytes]


def cell_to_text(value: Any) -> str:
    """
    Render a raw cell value as display text.

    Integral floats lose their ``.0`` (Excel stores every number as a float),
    dates are rendered as ``YYYY-MM-DD`` and missing values become ``""``.

    Example:
        >>> cell_to_text(3.0)
        '3'
        >>> cell_to_text(None)
        ''
        >>> cell_to_text(datetime(2024, 3, 1, 0, 0))
        '2024-03-01'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (datetime, date)):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, int):
        return str(value)
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    # CellRichText and other wrappers render their plain text
    return str(value)


def build_sheet_frame(sheet_name: str, raw_rows: List[List[Any]]) -> SheetFrame:
    """
    Build a SheetFrame from raw cell values.

    Rows may be ragged; pandas pads them to the widest row and every cell is
    rendered with :func:`cell_to_text`. Leading blank rows are skipped, so the
    header row is the first row with any text; its sheet position is kept in
    ``SheetFrame.header_row``.
    """
    if not raw_rows:
        return SheetFrame(sheet_name=sheet_name, headers=[], rows=[])

    df = pd.DataFrame(raw_rows, dtype=object)
    df = df.map(cell_to_text)
    grid = df.values.tolist()

    header_row = next(
        (idx for idx, row in enumerate(grid) if any(str(v).strip() for v in row)),
        None,
    )
    if header_row is None:
        return SheetFrame(sheet_name=sheet_name, headers=[], rows=[])

    headers = [str(value).strip() for value in grid[header_row]]
    return SheetFrame(
        sheet_name=sheet_name,
        headers=headers,
        rows=grid[header_row + 1 :],
        header_row=header_row,
    )


class LoadedSheet(ABC):
    """A worksheet of an open workbook."""

    name: str

    @abstractmethod
    def raw_rows(self) -> List[List[Any]]:
        """Cell values row by row, starting at the sheet's first row."""

    @abstractmethod
    def annotation_fragments(self, column_index: int, row_index: int) -> List[str]:
        """Comment/note texts of the cell at 0-based (column, sheet row)."""

    def to_frame(self) -> SheetFrame:
        return build_sheet_frame(self.name, self.raw_rows())

    def get_annotation(self, column_index: int, row_index: int) -> str:
        """
        Text of the comment/note attached to a cell, or ``""``.

        Args:
            column_index: 0-based column
            row_index: 0-based sheet row (see ``SheetFrame.header_row``)
        """
        fragments = [
            fragment
            for fragment in self.annotation_fragments(column_index, row_index)
            if fragment
        ]
        return " ".join(fragments).strip()


class OpenpyxlSheet(LoadedSheet):
    def __init__(self, worksheet: Any):
        self._ws = worksheet
        self.name = worksheet.title

    def raw_rows(self) -> List[List[Any]]:
        return [
            list(row)
            for row in self._ws.iter_rows(min_row=1, min_col=1, values_only=True)
        ]

    def annotation_fragments(self, column_index: int, row_index: int) -> List[str]:
        cell = self._ws.cell(row=row_index + 1, column=column_index + 1)
        comment = cell.comment
        if comment is None or not comment.text:
            return []
        return [comment.text]


class XlrdSheet(LoadedSheet):
    def __init__(self, sheet: Any, datemode: int):
        self._sheet = sheet
        self._datemode = datemode
        self.name = sheet.name

    def _cell_value(self, cell: Any) -> Any:
        if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            return None
        if cell.ctype == xlrd.XL_CELL_DATE:
            try:
                return xlrd.xldate.xldate_as_datetime(cell.value, self._datemode)
            except (xlrd.xldate.XLDateError, ValueError, OverflowError):
                return cell.value
        if cell.ctype == xlrd.XL_CELL_BOOLEAN:
            return bool(cell.value)
        if cell.ctype == xlrd.XL_CELL_ERROR:
            return xlrd.error_text_from_code.get(cell.value, "")
        return cell.value

    def raw_rows(self) -> List[List[Any]]:
        return [
            [self._cell_value(cell) for cell in self._sheet.row(row_idx)]
            for row_idx in range(self._sheet.nrows)
        ]

    def annotation_fragments(self, column_index: int, row_index: int) -> List[str]:
        note_map = getattr(self._sheet, "cell_note_map", None) or {}
        note = note_map.get((row_index, column_index))
        if note is None or not getattr(note, "text", ""):
            return []
        return [note.text]


class LoadedWorkbook:
    """An open workbook with its worksheets in declared order."""

    def __init__(
        self,
        sheets: List[LoadedSheet],
        engine: str,
        closer: Optional[Callable[[], None]] = None,
    ):
        self._sheets = sheets
        self.engine = engine
        self._closer = closer

    @property
    def sheet_names(self) -> List[str]:
        return [sheet.name for sheet in self._sheets]

    def __iter__(self) -> Iterator[LoadedSheet]:
        return iter(self._sheets)

    def __len__(self) -> int:
        return len(self._sheets)

    def close(self) -> None:
        if self._closer is not None:
            self._closer()
            self._closer = None

    def __enter__(self) -> "LoadedWorkbook":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _load_with_openpyxl(source: WorkbookSource) -> LoadedWorkbook:
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    # read_only mode does not expose comments
    wb = openpyxl.load_workbook(source, data_only=True)
    sheets: List[LoadedSheet] = [OpenpyxlSheet(ws) for ws in wb.worksheets]
    return LoadedWorkbook(sheets, engine="openpyxl", closer=wb.close)


def _load_with_xlrd(source: WorkbookSource) -> LoadedWorkbook:
    if isinstance(source, bytes):
        book = xlrd.open_workbook(file_contents=source)
    else:
        book = xlrd.open_workbook(str(source))
    sheets: List[LoadedSheet] = [
        XlrdSheet(book.sheet_by_index(idx), book.datemode)
        for idx in range(book.nsheets)
    ]
    return LoadedWorkbook(sheets, engine="xlrd", closer=book.release_resources)


ENGINES: Dict[str, Callable[[WorkbookSource], LoadedWorkbook]] = {
    "openpyxl": _load_with_openpyxl,
    "xlrd": _load_with_xlrd,
}


@dataclass
class WorkbookOpenResult:
    """Outcome of the open strategy: a workbook, or the reasons it failed."""

    file_path: Path
    workbook: Optional[LoadedWorkbook] = None
    strategy: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.workbook is not None

    @property
    def reason(self) -> str:
        return "; ".join(self.errors)


class ExcelReader:
    """
    Validates and opens workbooks with a path-then-buffer fallback strategy.

    The engine is chosen by extension (``.xls`` → xlrd, anything else →
    openpyxl). The in-memory fallback also tries the other engine, which
    rescues workbooks saved with the wrong extension.
    """

    def __init__(self, max_file_size_mb: Optional[int] = None):
        if max_file_size_mb is None:
            max_file_size_mb = get_settings().max_file_size_mb
        self.max_file_size_mb = max_file_size_mb

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    def validate_file(self, file_path: Union[str, Path]) -> int:
        """
        Check that a workbook can be handed to a parser.

        Returns:
            File size in bytes

        Raises:
            WorkbookFileError: missing, unreadable, not a file, empty or too large
        """
        path = Path(file_path)

        if not path.exists():
            raise WorkbookFileError(path, f"File does not exist: {path}")
        if not os.access(path, os.R_OK):
            raise WorkbookFileError(path, f"Cannot read file (permission denied): {path}")
        if not path.is_file():
            raise WorkbookFileError(path, f"Path is not a file: {path}")

        size = path.stat().st_size
        if size == 0:
            raise WorkbookFileError(path, f"File is empty: {path}")
        if size > self.max_file_size_bytes:
            raise WorkbookFileError(
                path, f"File too large ({round(size / 1024 / 1024)}MB): {path}"
            )
        return size

    @staticmethod
    def _engine_order(path: Path) -> Tuple[str, str]:
        if path.suffix.lower() == ".xls":
            return "xlrd", "openpyxl"
        return "openpyxl", "xlrd"

    def open_workbook(self, file_path: Union[str, Path]) -> WorkbookOpenResult:
        """
        Open a workbook, falling back to an in-memory parse.

        Returns:
            WorkbookOpenResult; ``ok`` is False when every strategy failed
        """
        path = Path(file_path)
        result = WorkbookOpenResult(file_path=path)
        primary, secondary = self._engine_order(path)

        try:
            result.workbook = ENGINES[primary](path)
            result.strategy = f"{primary}:path"
            return result
        except Exception as e:
            result.errors.append(f"{primary} (path): {e}")
            logger.info(
                "excel_reading.primary_parse_failed",
                file_path=str(path),
                engine=primary,
                error=str(e),
            )

        try:
            content = path.read_bytes()
        except OSError as e:
            result.errors.append(f"read bytes: {e}")
            return result

        for engine in (primary, secondary):
            try:
                result.workbook = ENGINES[engine](content)
                result.strategy = f"{engine}:buffer"
                logger.info(
                    "excel_reading.buffer_parse_succeeded",
                    file_path=str(path),
                    engine=engine,
                )
                return result
            except Exception as e:
                result.errors.append(f"{engine} (buffer): {e}")

        return result

    def load_workbook(self, file_path: Union[str, Path]) -> LoadedWorkbook:
        """
        Validate and open a workbook that has at least one worksheet.

        Raises:
            WorkbookFileError: on any validation or parse failure
        """
        path = Path(file_path)
        size = self.validate_file(path)
        logger.info(
            "excel_reading.started", file=path.name, size_kb=round(size / 1024)
        )

        opened = self.open_workbook(path)
        workbook = opened.workbook
        if workbook is None:
            raise WorkbookFileError(
                path,
                f"Cannot parse Excel file: {opened.reason}",
                stage=SearchStage.WORKBOOK_OPEN,
            )

        if len(workbook) == 0:
            workbook.close()
            raise WorkbookFileError(
                path,
                f"No worksheets found in file: {path}",
                stage=SearchStage.WORKBOOK_OPEN,
            )
        return workbook
