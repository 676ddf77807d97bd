"""
Row matching and category extraction.

A matched row is split into the co-curricular and leadership regions given by
the sheet's ColumnLayout. Only meaningful cells are kept; pending-review
columns get the text of the cell's comment appended to their key.
"""

from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from student_hours.domain.student_records.constants import (
    DEFAULT_IGNORED_VALUES,
    DEFAULT_PENDING_REVIEW_MARKER,
)
from student_hours.domain.student_records.models import ColumnLayout


class AnnotationSource(Protocol):
    def get_annotation(self, column_index: int, row_index: int) -> str:
        """Comment text of the cell at 0-based (column, sheet row), or ``""``."""
        ...


def row_matches(row: Sequence[str], layout: ColumnLayout, identifier: str) -> bool:
    """
    Exact, trimmed, case-sensitive comparison of the identifier cell.

    Rows too short to reach the identifier column never match.
    """
    idx = layout.identifier_index
    if idx < 0 or idx >= len(row):
        return False
    cell = row[idx]
    return str(cell if cell is not None else "").strip() == identifier.strip()


def is_meaningful_value(value: Optional[str], ignored_values: Iterable[str]) -> bool:
    """
    False for blank cells, placeholders such as ``-`` and numeric zero.

    Example:
        >>> is_meaningful_value("3", ["-", "/"])
        True
        >>> is_meaningful_value("0.0", ["-", "/"])
        False
    """
    if value is None:
        return False
    text = str(value).strip()
    if not text or text in set(ignored_values):
        return False
    try:
        return float(text) != 0
    except ValueError:
        return True


class RecordExtractor:
    """Builds the category mappings for matched rows of one sheet."""

    def __init__(
        self,
        pending_review_marker: Optional[str] = None,
        ignored_values: Optional[Iterable[str]] = None,
    ):
        self.pending_review_marker = (
            pending_review_marker or DEFAULT_PENDING_REVIEW_MARKER
        ).lower()
        self.ignored_values = list(
            ignored_values if ignored_values is not None else DEFAULT_IGNORED_VALUES
        )

    def effective_key(
        self,
        header: str,
        column_index: int,
        data_row_index: int,
        annotations: Optional[AnnotationSource],
        header_row: int = 0,
    ) -> str:
        """
        Header text, extended with the cell comment on pending-review columns.

        The data row at ``data_row_index`` sits on sheet row
        ``header_row + data_row_index + 1``.
        """
        header_text = header.strip()
        if annotations is None or self.pending_review_marker not in header_text.lower():
            return header_text

        annotation = annotations.get_annotation(
            column_index, header_row + data_row_index + 1
        )
        if annotation:
            return f"{header_text} - {annotation}"
        return header_text

    def extract_region(
        self,
        columns: Iterable[int],
        row: Sequence[str],
        data_row_index: int,
        headers: Sequence[str],
        annotations: Optional[AnnotationSource],
        header_row: int = 0,
    ) -> Dict[str, str]:
        region: Dict[str, str] = {}
        for col_idx in columns:
            if col_idx >= len(headers) or col_idx >= len(row):
                continue
            header = headers[col_idx]
            if not header or not header.strip():
                continue
            value = row[col_idx]
            if not is_meaningful_value(value, self.ignored_values):
                continue
            key = self.effective_key(
                header, col_idx, data_row_index, annotations, header_row
            )
            # Duplicate keys: the rightmost column wins
            region[key] = value
        return region

    def extract(
        self,
        row: Sequence[str],
        data_row_index: int,
        layout: ColumnLayout,
        headers: Sequence[str],
        annotations: Optional[AnnotationSource] = None,
        header_row: int = 0,
    ) -> Tuple[Dict[str, str], Dict[str, str]]:
        """
        Split a matched row into (cocurriculares, liderazgo) mappings.

        Args:
            row: Cells of the matched data row
            data_row_index: 0-based index of the row among data rows
            layout: Column roles of the sheet
            headers: Header labels of the sheet
            annotations: Source of cell comments for pending-review columns
            header_row: 0-based sheet row holding the headers
        """
        cocurriculares = self.extract_region(
            layout.category_a_columns(),
            row,
            data_row_index,
            headers,
            annotations,
            header_row,
        )
        liderazgo = self.extract_region(
            layout.category_b_columns(),
            row,
            data_row_index,
            headers,
            annotations,
            header_row,
        )
        return cocurriculares, liderazgo


def find_matching_rows(
    rows: Sequence[Sequence[str]], layout: ColumnLayout, identifier: str
) -> List[int]:
    """0-based data-row indices whose identifier cell equals ``identifier``."""
    return [
        idx for idx, row in enumerate(rows) if row and row_matches(row, layout, identifier)
    ]


def extract_record(
    row: Sequence[str],
    data_row_index: int,
    layout: ColumnLayout,
    headers: Sequence[str],
    annotations: Optional[AnnotationSource] = None,
    pending_review_marker: Optional[str] = None,
    ignored_values: Optional[Iterable[str]] = None,
    header_row: int = 0,
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Convenience wrapper around :meth:`RecordExtractor.extract`."""
    extractor = RecordExtractor(
        pending_review_marker=pending_review_marker, ignored_values=ignored_values
    )
    return extractor.extract(
        row, data_row_index, layout, headers, annotations, header_row
    )
