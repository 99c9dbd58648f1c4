# =============================================================================
# Error Handling Types (Result + ErrorReport)
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar('T')


class ErrorType(Enum):
    ALREADY_EXISTS = "already_exists"
    NAME_TAKEN = "name_taken"
    INVALID_NAME = "invalid_name"
    IO_ERROR = "io_error"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"
    FILE_NOT_FOUND = "file_not_found"
    PERMISSION_ERROR = "permission_error"
    LAUNCH_FAILURE = "launch_failure"


@dataclass
class Error:
    error_type: ErrorType
    message: str
    context: dict = field(default_factory=dict)
    original_exception: Exception = None


@dataclass
class Result(Generic[T]):
    success: bool
    value: T = None
    error: Error = None

    @staticmethod
    def ok(value: T) -> 'Result[T]':
        return Result(success=True, value=value)

    @staticmethod
    def err(error: Error) -> 'Result[T]':
        return Result(success=False, error=error)

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success


@dataclass
class ErrorReport:
    errors: list[Error] = field(default_factory=list)
    warnings: list[Error] = field(default_factory=list)

    def add_error(self, error: Error):
        self.errors.append(error)
        # bind() keeps loguru from str.format-ing user text in the message
        logger.bind(
            operation="error_report",
            status="error",
            error_type=error.error_type.value,
            **error.context
        ).error(error.message)

    def add_warning(self, error: Error):
        self.warnings.append(error)
        logger.bind(
            operation="error_report",
            status="warning",
            error_type=error.error_type.value,
            **error.context
        ).warning(error.message)

    def collect_result(self, result: Result, recoverable: bool = False) -> bool:
        """
        Collect error from Result into report if failed.

        Recoverable failures (a taken name, a script that exited non-zero)
        are filed as warnings so the summary separates them from I/O faults.
        """
        if result.is_err():
            if recoverable:
                self.add_warning(result.error)
            else:
                self.add_error(result.error)
            return False
        return True

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def log_summary(self, op_trace_id: str):
        """Log final summary for the session."""
        logger.info(
            "Session complete",
            operation="error_report",
            status="complete",
            trace_id=op_trace_id,
            metrics={
                "total_errors": len(self.errors),
                "total_warnings": len(self.warnings)
            }
        )
