"""Search exceptions with stage markers for structured logging.

Only SearchInputError propagates to callers of the search; file and sheet errors
are caught by the scanner, logged and recorded as failures.
"""

from enum import Enum
from typing import Dict, Optional


class SearchStage(str, Enum):
    """Enum for search pipeline stages."""

    INPUT_VALIDATION = "input_validation"
    FILE_DISCOVERY = "file_discovery"
    FILE_VALIDATION = "file_validation"
    WORKBOOK_OPEN = "workbook_open"
    SHEET_READING = "sheet_reading"
    SHEET_LAYOUT = "sheet_layout"


class SearchError(Exception):
    """Base error for the student record search with stage context."""

    def __init__(
        self,
        stage: SearchStage,
        message: str,
        original_error: Optional[Exception] = None,
    ):
        self.stage = SearchStage(stage)
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> Dict[str, str]:
        """Convert to structured dict for logging."""
        data = {
            "error_type": type(self).__name__,
            "failed_stage": self.stage.value,
            "message": str(self),
        }
        if self.original_error is not None:
            data["original_error_type"] = type(self.original_error).__name__
            data["original_error_message"] = str(self.original_error)
        return data


class SearchInputError(SearchError):
    """Missing root or identifier, nonexistent root, or no eligible files."""

    def __init__(self, message: str, stage: SearchStage = SearchStage.INPUT_VALIDATION):
        super().__init__(stage=stage, message=message)


class WorkbookFileError(SearchError):
    """A workbook that cannot be validated, opened or has no sheets."""

    def __init__(
        self,
        file_path: str,
        message: str,
        stage: SearchStage = SearchStage.FILE_VALIDATION,
        original_error: Optional[Exception] = None,
    ):
        self.file_path = str(file_path)
        super().__init__(stage=stage, message=message, original_error=original_error)

    def to_dict(self) -> Dict[str, str]:
        data = super().to_dict()
        data["file_path"] = self.file_path
        return data


class SheetLayoutError(SearchError):
    """A worksheet whose header row cannot be segmented safely."""

    def __init__(self, sheet_name: str, message: str):
        self.sheet_name = sheet_name
        super().__init__(stage=SearchStage.SHEET_LAYOUT, message=message)

    def to_dict(self) -> Dict[str, str]:
        data = super().to_dict()
        data["sheet_name"] = self.sheet_name
        return data


class SheetReadError(SearchError):
    """A worksheet whose cells cannot be turned into a text grid."""

    def __init__(
        self,
        sheet_name: str,
        message: str,
        original_error: Optional[Exception] = None,
    ):
        self.sheet_name = sheet_name
        super().__init__(
            stage=SearchStage.SHEET_READING,
            message=message,
            original_error=original_error,
        )

    def to_dict(self) -> Dict[str, str]:
        data = super().to_dict()
        data["sheet_name"] = self.sheet_name
        return data
