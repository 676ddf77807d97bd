"""
Header row classification for hours workbooks.

A sheet's first row is searched for three roles:

    COD | Nombre | Revisiones pendientes cocurriculares | Taller X | Revisiones pendientes liderazgo | Taller Y
     ^                 ^ start of category A                          ^ start of category B

The identifier column is found by fuzzy alias matching; the two sentinel
columns by exact (trimmed, case-insensitive) label.
"""

from typing import Iterable, Optional, Sequence

from student_hours.domain.student_records.constants import (
    DEFAULT_CATEGORY_A_LABEL,
    DEFAULT_CATEGORY_B_LABEL,
    DEFAULT_IDENTIFIER_ALIASES,
)
from student_hours.domain.student_records.models import ColumnLayout
from student_hours.io.connectors.exceptions import SheetLayoutError


def _normalize(header: object) -> str:
    return str(header if header is not None else "").strip().lower()


def find_identifier_column(
    headers: Sequence[str], aliases: Optional[Iterable[str]] = None
) -> int:
    """
    Locate the student identifier column.

    A header matches when its trimmed, lower-cased text equals or contains any
    alias. The first matching header (left to right) wins.

    Returns:
        0-based column index, or -1 if no header matches

    Example:
        >>> find_identifier_column(["Nombre", "CÓDIGO", "COD"])
        1
    """
    alias_list = [
        alias.strip().lower()
        for alias in (aliases if aliases is not None else DEFAULT_IDENTIFIER_ALIASES)
        if alias.strip()
    ]
    for idx, header in enumerate(headers):
        text = _normalize(header)
        if not text:
            continue
        if any(text == alias or alias in text for alias in alias_list):
            return idx
    return -1


def find_sentinel_column(headers: Sequence[str], label: str) -> Optional[int]:
    """Index of the first header equal to ``label`` (trimmed, case-insensitive)."""
    target = _normalize(label)
    for idx, header in enumerate(headers):
        if _normalize(header) == target:
            return idx
    return None


def classify_headers(
    headers: Sequence[str],
    identifier_aliases: Optional[Iterable[str]] = None,
    category_a_label: Optional[str] = None,
    category_b_label: Optional[str] = None,
) -> ColumnLayout:
    """
    Compute the ColumnLayout of a header row.

    The two sentinels are located independently; their relative order is
    checked separately by :func:`validate_layout`.
    """
    return ColumnLayout(
        identifier_index=find_identifier_column(headers, identifier_aliases),
        category_a_index=find_sentinel_column(
            headers, category_a_label or DEFAULT_CATEGORY_A_LABEL
        ),
        category_b_index=find_sentinel_column(
            headers, category_b_label or DEFAULT_CATEGORY_B_LABEL
        ),
        column_count=len(headers),
    )


def validate_layout(layout: ColumnLayout, sheet_name: str) -> None:
    """
    Reject layouts that would produce corrupt regions.

    Raises:
        SheetLayoutError: the leadership sentinel precedes the co-curricular one
    """
    if layout.is_inverted:
        raise SheetLayoutError(
            sheet_name,
            f"Sentinel columns out of order in sheet '{sheet_name}': "
            f"category B at column {layout.category_b_index} precedes "
            f"category A at column {layout.category_a_index}",
        )
