"""
Period (year, month) inference from folder structures and file names.

Report workbooks are filed under trees such as ``2024/03. Marzo/Reporte.xlsx``
or carry the period in their name (``MBA_2024_01.xlsx``). Neither convention is
enforced, so inference is layered: path segments first (a month name in the
file name counts like a month folder), the file-name date patterns as a
fallback and today's date as the last resort.
"""

import logging
import re
from datetime import date
from pathlib import Path, PurePath
from typing import List, Optional, Pattern, Tuple, Union

from student_hours.domain.student_records.models import Period

logger = logging.getLogger(__name__)

MIN_YEAR = 2000
MAX_YEAR = 2099

YEAR_SEGMENT_PATTERN = re.compile(r"^\d{4}$")
MONTH_PREFIX_PATTERN = re.compile(r"^(\d{1,2})\.?\s")
BARE_MONTH_PATTERN = re.compile(r"^(0?[1-9]|1[0-2])$")

# Substring matches, first hit in declaration order wins
MONTH_NAMES: List[Tuple[str, int]] = [
    ("enero", 1),
    ("jan", 1),
    ("january", 1),
    ("febrero", 2),
    ("feb", 2),
    ("february", 2),
    ("marzo", 3),
    ("mar", 3),
    ("march", 3),
    ("abril", 4),
    ("abr", 4),
    ("apr", 4),
    ("april", 4),
    ("mayo", 5),
    ("may", 5),
    ("junio", 6),
    ("jun", 6),
    ("june", 6),
    ("julio", 7),
    ("jul", 7),
    ("july", 7),
    ("agosto", 8),
    ("ago", 8),
    ("aug", 8),
    ("august", 8),
    ("septiembre", 9),
    ("setiembre", 9),
    ("sep", 9),
    ("september", 9),
    ("octubre", 10),
    ("oct", 10),
    ("october", 10),
    ("noviembre", 11),
    ("nov", 11),
    ("november", 11),
    ("diciembre", 12),
    ("dic", 12),
    ("dec", 12),
    ("december", 12),
]

# (pattern, year group, month group)
FILENAME_PATTERNS: List[Tuple[Pattern[str], int, int]] = [
    (re.compile(r"(\d{4})[-_](\d{2})"), 1, 2),  # 2024-01 / 2024_01
    (re.compile(r"(\d{4})(\d{2})"), 1, 2),  # 202401
    (re.compile(r"(\d{2})[-_](\d{4})"), 2, 1),  # 01-2024 / 01_2024
]


def _pad_month(month: Union[int, str]) -> str:
    return str(month).zfill(2)


def is_year_segment(segment: str) -> bool:
    """Return True for a four-digit segment within 2000-2099."""
    if not YEAR_SEGMENT_PATTERN.match(segment):
        return False
    return MIN_YEAR <= int(segment) <= MAX_YEAR


def month_from_folder_name(folder_name: str) -> Optional[str]:
    """
    Recognize a month in a folder name.

    Args:
        folder_name: A single path segment such as ``"01. Enero"`` or ``"Marzo"``

    Returns:
        Month number as an unpadded string (``"1"``..``"12"``) or None

    Example:
        >>> month_from_folder_name("03. Marzo")
        '3'
        >>> month_from_folder_name("Setiembre")
        '9'
        >>> month_from_folder_name("Informes") is None
        True
    """
    folder = folder_name.lower().strip()

    prefix = MONTH_PREFIX_PATTERN.match(folder)
    if prefix:
        month_num = int(prefix.group(1))
        if 1 <= month_num <= 12:
            return str(month_num)

    for month_name, month_num in MONTH_NAMES:
        if month_name in folder:
            return str(month_num)

    if BARE_MONTH_PATTERN.match(folder):
        return str(int(folder))

    return None


def extract_period_from_filename(
    file_name: str, today: Optional[date] = None
) -> Period:
    """
    Extract a period from a file name, defaulting to today's year and month.

    Example:
        >>> extract_period_from_filename("MBA_2023_09.xlsx")
        Period(year='2023', month='09')
        >>> extract_period_from_filename("03-2024 horas.xlsx")
        Period(year='2024', month='03')
    """
    for pattern, year_group, month_group in FILENAME_PATTERNS:
        match = pattern.search(file_name)
        if match:
            return Period(year=match.group(year_group), month=match.group(month_group))

    today = today or date.today()
    logger.debug("No period found in file name %r, using %s", file_name, today)
    return Period(year=str(today.year), month=_pad_month(today.month))


def _path_segments(file_path: Union[str, PurePath]) -> List[str]:
    return list(PurePath(file_path).parts)


def extract_period_from_path(
    file_path: Union[str, Path],
    file_name: Optional[str] = None,
    today: Optional[date] = None,
) -> Period:
    """
    Infer the (year, month) a workbook belongs to.

    Path segments, the file name included, are scanned from the deepest up.
    A year segment (2000-2099) takes its month from the next segment, else the
    previous one, and ends the scan. Before any year is seen, a month segment looks for a year
    in its neighbours the same way. Fields still empty afterwards come from
    :func:`extract_period_from_filename`.

    Args:
        file_path: Full path of the workbook
        file_name: File name (defaults to the last component of ``file_path``)
        today: Reference date for the last-resort default

    Returns:
        Period with a 4-digit year and a zero-padded month

    Example:
        >>> extract_period_from_path("/data/2024/01. Enero/Reporte.xlsx")
        Period(year='2024', month='01')
    """
    if file_name is None:
        file_name = PurePath(file_path).name

    parts = _path_segments(file_path)
    year = ""
    month = ""

    for i in range(len(parts) - 1, -1, -1):
        part = parts[i]

        if is_year_segment(part):
            year = part
            if i + 1 < len(parts):
                month_num = month_from_folder_name(parts[i + 1])
                if month_num:
                    month = _pad_month(month_num)
            if i - 1 >= 0 and not month:
                month_num = month_from_folder_name(parts[i - 1])
                if month_num:
                    month = _pad_month(month_num)
            break

        if not year:
            month_num = month_from_folder_name(part)
            if month_num:
                month = _pad_month(month_num)
                if i + 1 < len(parts) and is_year_segment(parts[i + 1]):
                    year = parts[i + 1]
                if i - 1 >= 0 and not year and is_year_segment(parts[i - 1]):
                    year = parts[i - 1]

    if not year or not month:
        from_name = extract_period_from_filename(file_name, today=today)
        year = year or from_name.year
        month = month or from_name.month

    return Period(year=year, month=month)
