"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class SchemaError(PackageError):
    """Raised when a type declaration is malformed."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UnknownTypeError(SchemaError):
    """Raised when a field type has no registered converter."""

    message: str = "No converter registered"
    type_ref: object = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message} for field type {self.type_ref!r}"


@dataclass(frozen=True)
class PatternCompileError(PackageError):
    """Raised when a pattern cannot be compiled into a matcher.

    A malformed pattern is a defect in the declaration, not in the parsed
    input, so this error is never retried.
    """

    source: str
    type_name: str
    variant: str | None = None
    index: int = 0
    reason: str = ""

    def __str__(self) -> str:
        """Return error message payload."""
        owner = f"{self.type_name}::{self.variant}" if self.variant else self.type_name
        return f"Invalid pattern #{self.index} for {owner} ({self.source!r}): {self.reason}"


@dataclass(frozen=True)
class ParseError(PackageError, ValueError):
    """Root of the errors raised while parsing an input string."""


@dataclass(frozen=True)
class NoMatchError(ParseError):
    """Raised when none of the applicable patterns matched the input."""

    input: str
    type_name: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Regex matching failed for: {self.input!r}"


@dataclass(frozen=True, kw_only=True)
class BindError(ParseError):
    """Raised when a pattern matched but a field could not be populated."""

    type_name: str | None = None
    variant: str | None = None
    pattern_index: int | None = None
    input: str | None = None


@dataclass(frozen=True, kw_only=True)
class MissingGroupError(BindError):
    """Raised when the capture group for a field did not participate in the match."""

    index: int

    @property
    def group(self) -> int:
        """Return the capture group number read for the field."""
        return self.index + 1

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Getting group {self.group} failed"


@dataclass(frozen=True, kw_only=True)
class FieldConversionError(BindError):
    """Raised when a captured substring cannot be converted to its field type."""

    field: str | int
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        if isinstance(self.field, int):
            return f"Field {self.field} parsing error: {self.message}"
        return f"Field '{self.field}' parsing error: {self.message}"


@dataclass
class SchemaStoreError(PackageError):
    """Raised when schema loading/saving constraints are violated."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
