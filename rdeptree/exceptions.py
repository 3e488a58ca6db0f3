"""
Custom exception hierarchy for rdeptree.

This module defines structured exception types used across rdeptree.
All exceptions inherit from :class:`RDepTreeError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Row-level grammar failures share :class:`RowParseError` and expose a
:class:`ParseFailure` ``cause`` so callers can tell a malformed row, an
unknown comparison operator, an unknown environment variable and leftover
trailing input apart without string matching.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, MutableMapping, Optional


class ParseFailure(str, Enum):
    """Distinguishable causes of a failed row parse."""

    MALFORMED_ROW = "malformed_row"
    INVALID_OPERATOR = "invalid_operator"
    INVALID_ENVIRONMENT_VARIABLE = "invalid_environment_variable"
    UNEXPECTED_TRAILING_INPUT = "unexpected_trailing_input"


class RowKind(str, Enum):
    """Metadata row types understood by the grammar."""

    NAME = "Name"
    VERSION = "Version"
    REQUIRES_DIST = "Requires-Dist"


class RDepTreeError(Exception):
    """Base exception for all rdeptree errors.

    All rdeptree-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ParseError(RDepTreeError):
    """Raised when metadata text cannot be parsed.

    Args:
        message: Error description.
        line_number: Line number where parsing failed.
        line_content: Raw content of the problematic line.
        file_path: Path to the file being parsed.
    """

    __slots__ = ("line_number", "line_content", "file_path")

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "line", line_number)
        _add_if(
            details,
            "content",
            _truncate(line_content) if line_content is not None else None,
        )
        _add_if(details, "file", file_path)

        super().__init__(message, details)

        self.line_number = line_number
        self.line_content = line_content
        self.file_path = file_path

    def with_context(
        self,
        *,
        line_number: Optional[int] = None,
        file_path: Optional[str] = None,
    ) -> "ParseError":
        """Attach location context and return ``self`` for re-raising.

        Args:
            line_number: 1-based line number inside the metadata block.
            file_path: Path of the metadata file, if known.

        Returns:
            The same exception instance.
        """
        if line_number is not None:
            self.line_number = line_number
            self.details["line"] = line_number
        if file_path is not None:
            self.file_path = file_path
            self.details["file"] = file_path
        return self


class RowParseError(ParseError):
    """Raised when a single metadata row does not match its grammar.

    Args:
        message: Error description.
        line_content: The row being parsed.
        row_kind: Which row grammar was applied.
        position: Zero-based column where the mismatch was detected.
    """

    __slots__ = ("row_kind", "position")

    cause: ParseFailure = ParseFailure.MALFORMED_ROW

    def __init__(
        self,
        message: str,
        *,
        line_content: Optional[str] = None,
        row_kind: Optional[RowKind] = None,
        position: Optional[int] = None,
        line_number: Optional[int] = None,
        file_path: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            line_number=line_number,
            line_content=line_content,
            file_path=file_path,
        )
        _add_if(self.details, "row", row_kind.value if row_kind else None)
        _add_if(self.details, "column", position)
        self.details["cause"] = self.cause.value

        self.row_kind = row_kind
        self.position = position


class MalformedRowError(RowParseError):
    """Row does not have the expected keyword/value shape."""

    cause = ParseFailure.MALFORMED_ROW


class UnexpectedTrailingInputError(MalformedRowError):
    """A well-formed prefix was followed by unconsumed text."""

    cause = ParseFailure.UNEXPECTED_TRAILING_INPUT


class InvalidOperatorError(RowParseError):
    """Comparison operator text is not one of the recognised operators."""

    cause = ParseFailure.INVALID_OPERATOR


class InvalidEnvironmentVariableError(RowParseError):
    """Environment marker names a variable outside the supported set."""

    cause = ParseFailure.INVALID_ENVIRONMENT_VARIABLE


class MetadataError(ParseError):
    """Raised when a metadata block cannot be assembled into a record.

    Args:
        message: Error description.
        field: Metadata field involved (``Name`` or ``Version``).
        **kwargs: Additional arguments forwarded to ``ParseError``.
    """

    __slots__ = ("field",)

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.field = field
        if field is not None:
            self.details["field"] = field


class MissingFieldError(MetadataError):
    """A required field never appeared in the metadata block."""


class DuplicateFieldError(MetadataError):
    """A single-valued field appeared more than once."""


class FileOperationError(RDepTreeError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/scan).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class LocatorError(RDepTreeError):
    """Raised when the interpreter or its site-packages cannot be located.

    Args:
        message: Error description.
        python: Interpreter path that was queried.
        output: Raw interpreter output, truncated for safety.
    """

    __slots__ = ("python", "output")

    def __init__(
        self,
        message: str,
        *,
        python: Optional[str] = None,
        output: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "python", python)
        if output:
            details["output"] = _truncate(output.strip())

        super().__init__(message, details)

        self.python = python
        self.output = output


class ConfigError(RDepTreeError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Offending option name, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
