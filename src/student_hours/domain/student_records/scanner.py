"""
Per-workbook scan: open a workbook, walk its sheets and collect matching rows.

Sheet-level problems never abort the file; they are logged and recorded as
``ScanFailure(scope="sheet")`` entries on the returned FileScanResult.
File-level problems (validation, parsing) raise WorkbookFileError for the
caller to fold into its report.
"""

from datetime import date
from pathlib import Path
from typing import List, Optional, Union

from student_hours.config import Settings, get_settings
from student_hours.domain.student_records.header_classifier import (
    classify_headers,
    validate_layout,
)
from student_hours.domain.student_records.models import (
    FileScanResult,
    Period,
    ScanFailure,
    SearchResult,
)
from student_hours.domain.student_records.record_extractor import (
    RecordExtractor,
    find_matching_rows,
)
from student_hours.io.connectors.exceptions import SearchError, SheetReadError
from student_hours.io.readers.excel_reader import ExcelReader, LoadedSheet
from student_hours.utils.logging import get_logger
from student_hours.utils.period_parser import extract_period_from_path

logger = get_logger(__name__)


class WorkbookScanner:
    """Scan one workbook for rows belonging to a student."""

    def __init__(
        self,
        reader: Optional[ExcelReader] = None,
        settings: Optional[Settings] = None,
        today: Optional[date] = None,
    ):
        self.settings = settings or get_settings()
        self.reader = reader or ExcelReader(
            max_file_size_mb=self.settings.max_file_size_mb
        )
        self.extractor = RecordExtractor(
            pending_review_marker=self.settings.pending_review_marker,
            ignored_values=self.settings.ignored_cell_values,
        )
        self.today = today

    def scan_file(
        self, file_path: Union[str, Path], file_name: str, identifier: str
    ) -> FileScanResult:
        """
        Collect every row of every sheet whose identifier cell equals ``identifier``.

        Args:
            file_path: Full path of the workbook
            file_name: Display name reported in results
            identifier: Student code to match (trimmed, case-sensitive)

        Returns:
            FileScanResult with matches in sheet order, then row order

        Raises:
            WorkbookFileError: file missing, unreadable, empty, too large,
                unparseable or without worksheets
        """
        path = Path(file_path)
        accumulator = FileScanResult(file_path=str(path))

        workbook = self.reader.load_workbook(path)
        try:
            period = extract_period_from_path(path, file_name, today=self.today)
            logger.debug(
                "workbook_scan.period_inferred",
                file=file_name,
                year=period.year,
                month=period.month,
            )

            for sheet in workbook:
                accumulator.sheets_scanned += 1
                try:
                    accumulator.results.extend(
                        self.scan_sheet(sheet, path, file_name, period, identifier)
                    )
                except SearchError as e:
                    logger.warning(
                        "workbook_scan.sheet_failed", file=file_name, **e.to_dict()
                    )
                    accumulator.failures.append(
                        ScanFailure(
                            scope="sheet",
                            file_path=str(path),
                            reason=str(e),
                            sheet_name=sheet.name,
                        )
                    )
                except Exception as e:
                    logger.warning(
                        "workbook_scan.sheet_failed",
                        file=file_name,
                        sheet_name=sheet.name,
                        error_type=type(e).__name__,
                        message=str(e),
                    )
                    accumulator.failures.append(
                        ScanFailure(
                            scope="sheet",
                            file_path=str(path),
                            reason=f"{type(e).__name__}: {e}",
                            sheet_name=sheet.name,
                        )
                    )
        finally:
            workbook.close()

        logger.info(
            "workbook_scan.completed",
            file=file_name,
            sheets=accumulator.sheets_scanned,
            matches=len(accumulator.results),
            failed_sheets=len(accumulator.failures),
        )
        return accumulator

    def scan_sheet(
        self,
        sheet: LoadedSheet,
        file_path: Path,
        file_name: str,
        period: Period,
        identifier: str,
    ) -> List[SearchResult]:
        try:
            frame = sheet.to_frame()
        except Exception as e:
            raise SheetReadError(
                sheet.name,
                f"Cannot read sheet '{sheet.name}': {type(e).__name__}: {e}",
                original_error=e,
            ) from e

        if not frame.headers or not any(frame.headers):
            logger.info(
                "workbook_scan.sheet_skipped",
                file=file_name,
                sheet_name=sheet.name,
                reason="no_headers",
            )
            return []
        if frame.row_count == 0:
            logger.info(
                "workbook_scan.sheet_skipped",
                file=file_name,
                sheet_name=sheet.name,
                reason="no_data_rows",
            )
            return []

        layout = classify_headers(
            frame.headers,
            identifier_aliases=self.settings.identifier_aliases,
            category_a_label=self.settings.category_a_label,
            category_b_label=self.settings.category_b_label,
        )
        if not layout.has_identifier:
            logger.info(
                "workbook_scan.sheet_skipped",
                file=file_name,
                sheet_name=sheet.name,
                reason="no_identifier_column",
            )
            return []
        validate_layout(layout, sheet.name)

        results: List[SearchResult] = []
        for data_row_index in find_matching_rows(frame.rows, layout, identifier):
            cocurriculares, liderazgo = self.extractor.extract(
                frame.rows[data_row_index],
                data_row_index,
                layout,
                frame.headers,
                annotations=sheet,
                header_row=frame.header_row,
            )
            results.append(
                SearchResult(
                    file=file_name,
                    file_path=str(file_path),
                    sheet=sheet.name,
                    period=period,
                    row_index=data_row_index + 1,
                    cocurriculares=cocurriculares,
                    liderazgo=liderazgo,
                )
            )
            logger.debug(
                "workbook_scan.row_matched",
                file=file_name,
                sheet_name=sheet.name,
                row_index=data_row_index + 1,
            )
        return results
