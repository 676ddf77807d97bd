"""
Student record search service.

Entry point of the search: validates the root folder and identifier, discovers
every eligible workbook and folds the per-file scans into a SearchReport.
Workbooks that fail are logged and recorded, never fatal; only invalid input
raises.
"""

import time
from pathlib import Path
from typing import List, Optional, Union

from student_hours.config import Settings, get_settings
from student_hours.domain.student_records.models import (
    ScanFailure,
    SearchReport,
    SearchResult,
)
from student_hours.domain.student_records.scanner import WorkbookScanner
from student_hours.io.connectors.exceptions import (
    SearchInputError,
    SearchStage,
    WorkbookFileError,
)
from student_hours.io.connectors.file_discovery import FileDiscovery
from student_hours.utils.logging import get_logger

logger = get_logger(__name__)


def select_root(
    candidate: Optional[Union[str, Path]] = None,
    settings: Optional[Settings] = None,
) -> Optional[Path]:
    """
    Resolve the folder a search should run in.

    A non-blank ``candidate`` wins; otherwise the configured ``default_root``
    is used. Returns None when neither is given, which callers treat as
    "nothing selected".
    """
    settings = settings or get_settings()
    for value in (candidate, settings.default_root):
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return Path(text).expanduser()
    return None


class StudentRecordSearch:
    """Search a folder tree of hours workbooks for one student's rows."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        discovery: Optional[FileDiscovery] = None,
        scanner: Optional[WorkbookScanner] = None,
    ):
        self.settings = settings or get_settings()
        self.discovery = discovery or FileDiscovery(
            excluded_dirs=self.settings.excluded_dirs,
            extensions=self.settings.excel_extensions,
            lock_file_marker=self.settings.lock_file_marker,
        )
        self.scanner = scanner or WorkbookScanner(settings=self.settings)

    @staticmethod
    def validate_inputs(
        root_path: Optional[Union[str, Path]], identifier: Optional[str]
    ) -> Path:
        if root_path is None or not str(root_path).strip():
            raise SearchInputError("A folder to search is required")
        if identifier is None or not str(identifier).strip():
            raise SearchInputError("A student identifier is required")

        root = Path(str(root_path).strip()).expanduser().resolve()
        if not root.exists():
            raise SearchInputError(f"Folder does not exist: {root}")
        if not root.is_dir():
            raise SearchInputError(f"Path is not a folder: {root}")
        return root

    def run(
        self, root_path: Union[str, Path], identifier: str
    ) -> SearchReport:
        """
        Search every eligible workbook under ``root_path``.

        Args:
            root_path: Folder to search recursively
            identifier: Student code, compared trimmed and case-sensitively

        Returns:
            SearchReport with results in discovery, sheet and row order plus
            the failures encountered along the way

        Raises:
            SearchInputError: empty input, missing folder, or no eligible files
        """
        root = self.validate_inputs(root_path, identifier)
        identifier = str(identifier).strip()
        start_time = time.perf_counter()

        logger.info("student_search.started", root_path=str(root), identifier=identifier)

        files = list(self.discovery.iter_files(root))
        logger.info(
            "file_discovery.completed", root_path=str(root), file_count=len(files)
        )
        if not files:
            raise SearchInputError(
                f"No Excel files found in folder: {root}",
                stage=SearchStage.FILE_DISCOVERY,
            )

        report = SearchReport(
            root_path=str(root), identifier=identifier, files_discovered=len(files)
        )

        for index, descriptor in enumerate(files, start=1):
            logger.debug(
                "student_search.file_started",
                file=descriptor.file_name,
                position=index,
                total=len(files),
            )
            try:
                file_result = self.scanner.scan_file(
                    descriptor.full_path, descriptor.file_name, identifier
                )
            except WorkbookFileError as e:
                logger.warning("student_search.file_failed", **e.to_dict())
                report.failures.append(
                    ScanFailure(scope="file", file_path=e.file_path, reason=str(e))
                )
                continue
            except Exception as e:
                logger.error(
                    "student_search.file_failed",
                    file_path=str(descriptor.full_path),
                    error_type=type(e).__name__,
                    message=str(e),
                )
                report.failures.append(
                    ScanFailure(
                        scope="file",
                        file_path=str(descriptor.full_path),
                        reason=f"{type(e).__name__}: {e}",
                    )
                )
                continue
            report.merge(file_result)

        logger.info(
            "student_search.completed",
            root_path=str(root),
            identifier=identifier,
            files_discovered=report.files_discovered,
            files_scanned=report.files_scanned,
            results=len(report.results),
            failures=len(report.failures),
            duration_ms=round((time.perf_counter() - start_time) * 1000),
        )
        return report

    def search(
        self, root_path: Union[str, Path], identifier: str
    ) -> List[SearchResult]:
        """Return only the matches of :meth:`run`."""
        return self.run(root_path, identifier).results


def search_student(
    root_path: Union[str, Path],
    identifier: str,
    settings: Optional[Settings] = None,
) -> List[SearchResult]:
    """
    Convenience function searching ``root_path`` for ``identifier``.

    Example:
        >>> results = search_student("/data/reportes", "20231234")  # doctest: +SKIP
        >>> [(r.year, r.month, r.sheet) for r in results]  # doctest: +SKIP
        [('2024', '03', 'Hoja1')]
    """
    return StudentRecordSearch(settings=settings).search(root_path, identifier)
