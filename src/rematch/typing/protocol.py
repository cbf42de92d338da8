"""Capability interfaces consumed by the core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence


class Matcher(Protocol):
    """Compiled, read-only form of a pattern."""

    def find_captures(self, text: str) -> Sequence[str | None] | None:
        """Search `text` and return its capture groups.

        Args:
            text: Input string.

        Returns:
            Sequence[str | None] | None: Whole match at index 0 followed by each
            group (None for a group that did not participate), or None when
            nothing matched.
        """


class Compiler(Protocol):
    """Builds a matcher from a pattern source."""

    def __call__(self, source: str) -> Matcher:
        """Compile `source`.

        Args:
            source: Pattern source string.

        Returns:
            Matcher: Compiled matcher.
        """


class Converter(Protocol):
    """Turns a captured substring into a field value."""

    def __call__(self, text: str) -> Any:  # noqa: ANN401
        """Convert `text`, raising `ValueError` with a readable message on failure.

        Args:
            text: Captured substring.

        Returns:
            Any: Converted value.
        """
