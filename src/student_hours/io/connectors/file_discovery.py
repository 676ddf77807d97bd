"""Recursive spreadsheet discovery.

Walks a folder tree depth-first and yields every eligible workbook: ``.xlsx``
and ``.xls`` files that are not editor lock files (``~$Report.xlsx``), skipping
hidden folders and build/dependency artifacts.
"""

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from student_hours.config import get_settings
from student_hours.domain.student_records.models import FileDescriptor
from student_hours.utils.logging import get_logger

logger = get_logger(__name__)


class FileDiscovery:
    """Find eligible spreadsheet files at any depth under a root folder."""

    def __init__(
        self,
        excluded_dirs: Optional[Iterable[str]] = None,
        extensions: Optional[Iterable[str]] = None,
        lock_file_marker: Optional[str] = None,
    ):
        settings = get_settings()
        self.excluded_dirs = {
            name.lower()
            for name in (
                excluded_dirs if excluded_dirs is not None else settings.excluded_dirs
            )
        }
        self.extensions = {
            ext.lower()
            for ext in (extensions if extensions is not None else settings.excel_extensions)
        }
        self.lock_file_marker = (
            lock_file_marker if lock_file_marker is not None else settings.lock_file_marker
        )

    def is_excluded_dir(self, name: str) -> bool:
        return name.startswith(".") or name.lower() in self.excluded_dirs

    def is_eligible_file(self, name: str) -> bool:
        if self.lock_file_marker and self.lock_file_marker in name:
            return False
        return os.path.splitext(name)[1].lower() in self.extensions

    def iter_files(self, root_path: Path) -> Iterator[FileDescriptor]:
        """
        Yield descriptors in depth-first discovery order.

        A directory that cannot be listed is logged and skipped; its siblings
        are still visited.
        """
        root_path = Path(root_path)
        yield from self._walk(root_path, root_path)

    def _walk(self, root_path: Path, current: Path) -> Iterator[FileDescriptor]:
        try:
            with os.scandir(current) as entries:
                items = list(entries)
        except OSError as e:
            logger.warning(
                "file_discovery.directory_unreadable",
                directory=str(current),
                error=str(e),
            )
            return

        for entry in items:
            try:
                is_dir = entry.is_dir()
                is_file = entry.is_file()
            except OSError as e:
                logger.warning(
                    "file_discovery.entry_unreadable", entry=entry.path, error=str(e)
                )
                continue

            if is_dir:
                if self.is_excluded_dir(entry.name):
                    logger.debug("file_discovery.directory_skipped", directory=entry.name)
                    continue
                logger.debug("file_discovery.searching_subfolder", directory=entry.name)
                yield from self._walk(root_path, Path(entry.path))
            elif is_file and self.is_eligible_file(entry.name):
                full_path = Path(entry.path)
                descriptor = FileDescriptor(
                    full_path=full_path,
                    file_name=entry.name,
                    relative_path=full_path.relative_to(root_path),
                    folder_path=full_path.parent,
                )
                logger.debug(
                    "file_discovery.file_found", relative_path=str(descriptor.relative_path)
                )
                yield descriptor


def discover_excel_files(
    root_path: Path, excluded_dirs: Optional[Iterable[str]] = None
) -> List[FileDescriptor]:
    """
    Convenience function returning every eligible workbook under ``root_path``.

    Args:
        root_path: Existing directory to search
        excluded_dirs: Override for the configured directory denylist

    Returns:
        FileDescriptors in discovery order
    """
    files = list(FileDiscovery(excluded_dirs=excluded_dirs).iter_files(Path(root_path)))
    logger.info(
        "file_discovery.completed", root_path=str(root_path), file_count=len(files)
    )
    return files
