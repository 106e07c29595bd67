"""
Error types for wgsl-variants parsing, validation, and generation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ir import SourceLocation


class VariantsError(Exception):
    """Base exception for all wgsl-variants errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(VariantsError):
    """
    Raised when declaration text cannot be parsed.

    Examples:
    - Unexpected tokens
    - Malformed value_enum / variants blocks
    - Literal that does not match its declared scalar kind
    - A cross-product ``shared`` block

    Attributes:
        expected: Description of what the parser expected at the location
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        expected: str | None = None,
    ):
        self.expected = expected
        super().__init__(message, context)


class ValidationError(VariantsError):
    """
    Raised when a parsed module fails semantic validation.

    Carries every issue found, not just the first one.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        lines = "\n".join(f"  - {issue}" for issue in issues)
        super().__init__(f"Validation failed:\n{lines}")


class ResourceError(VariantsError):
    """Raised when a template or declaration file cannot be read."""

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(message)


class PreprocessingError(VariantsError):
    """
    Raised when the preprocessor fails on one concrete variant.

    Attributes:
        declaration: Name of the variants declaration
        variant: Name of the top-level variant being processed
        combination_index: Position in enumeration order, for cross products
    """

    def __init__(
        self,
        declaration: str,
        variant: str,
        combination_index: int | None = None,
        reason: str | None = None,
    ):
        self.declaration = declaration
        self.variant = variant
        self.combination_index = combination_index

        where = f"{declaration}::{variant}"
        if combination_index is not None:
            where += f" (combination #{combination_index})"
        message = f"Preprocessing failed for {where}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CodegenError(VariantsError):
    """
    Raised when the emitter produces an inconsistent case table.

    This is an internal defect, never a user error.
    """

    pass


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single semantic problem found by the validator.

    Attributes:
        declaration: Declaration the issue belongs to
        message: Human-readable description
        variant: Variant name, when the issue is scoped to one variant
        missing_enum: Unresolved value-enum reference, if any
        key: Definition key or case name involved, if any
        location: Where the offending construct was declared, if known
    """

    declaration: str
    message: str
    variant: str | None = None
    missing_enum: str | None = None
    key: str | None = None
    location: SourceLocation | None = None

    def __str__(self) -> str:
        scope = self.declaration
        if self.variant:
            scope += f"::{self.variant}"
        if self.location is not None:
            return f"{self.location}: {scope}: {self.message}"
        return f"{scope}: {self.message}"


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line showing the error location
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "shaders.wgslv:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet is not None:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the offending line with a marker under the error column."""
        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^^^"
        return f"{prefix}{self.snippet}\n{marker}"


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    expected: str | None = None,
    source: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        expected: What the parser expected instead
        source: Full source text, used to attach the offending line

    Returns:
        ParseError with context attached
    """
    snippet = None
    if source is not None:
        lines = source.splitlines()
        if 0 < line <= len(lines):
            snippet = lines[line - 1]
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context, expected=expected)
