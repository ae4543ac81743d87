"""Error handling framework for testgen."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """testgen CLI exit codes."""

    SUCCESS = 0
    FAILURE = 1  # Generation failed, invalid config or bad input path


class TestGenError(Exception):
    """Base exception for testgen errors."""

    __test__ = False  # keep pytest from collecting this as a test class

    exit_code: ExitCode = ExitCode.FAILURE

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "exit_code": self.exit_code,
            **self.context,
        }


class ConfigError(TestGenError):
    """Configuration-related errors."""


class AnalysisError(TestGenError):
    """A source file could not be read or parsed."""

    def __init__(self, message: str, file_path: str, **context: Any) -> None:
        super().__init__(message, file_path=file_path, **context)
        self.file_path = file_path


class UnsupportedFileTypeError(TestGenError):
    """No analyzer is registered for a file type."""

    def __init__(self, file_type: str, file_path: str) -> None:
        super().__init__(
            f"Unsupported file type: {file_type}",
            file_type=file_type,
            file_path=file_path,
        )
        self.file_type = file_type
        self.file_path = file_path


class TemplateError(TestGenError):
    """Template lookup or rendering failed."""

    def __init__(self, message: str, template_name: str, **context: Any) -> None:
        super().__init__(message, template_name=template_name, **context)
        self.template_name = template_name


class GenerationError(TestGenError):
    """Test content could not be generated for a source file."""


class GenerationCancelledError(GenerationError):
    """A cancellation request stopped the run."""

    def __init__(self) -> None:
        super().__init__("Test generation was cancelled")


__all__ = [
    "AnalysisError",
    "ConfigError",
    "ExitCode",
    "GenerationCancelledError",
    "GenerationError",
    "TemplateError",
    "TestGenError",
    "UnsupportedFileTypeError",
]
