"""Compile-once cache of pattern matchers."""

from __future__ import annotations

import re
import threading
from typing import TYPE_CHECKING

from rematch.exceptions import PatternCompileError
from rematch.logging import get_logger

if TYPE_CHECKING:
    from rematch.typing.models import Pattern
    from rematch.typing.protocol import Compiler, Matcher

logger = get_logger(__name__)


class RegexMatcher:
    """Matcher backed by a compiled `re` pattern."""

    __slots__ = ("_regex",)

    def __init__(self, regex: re.Pattern[str]) -> None:
        self._regex = regex

    @property
    def regex(self) -> re.Pattern[str]:
        """Return the compiled regular expression."""
        return self._regex

    def find_captures(self, text: str) -> tuple[str | None, ...] | None:
        """Search anywhere in `text` and return the whole match plus its groups.

        Args:
            text (str): Input string.

        Returns:
            tuple[str | None, ...] | None: Group 0 then groups 1..n, or None.
        """
        match = self._regex.search(text)
        if match is None:
            return None
        return (match.group(0), *match.groups())

    def __repr__(self) -> str:
        return f"RegexMatcher({self._regex.pattern!r})"


def compile_regex(source: str) -> RegexMatcher:
    """Compile a pattern source with the standard `re` engine.

    Args:
        source (str): Pattern source.

    Returns:
        RegexMatcher: Compiled matcher.
    """
    return RegexMatcher(re.compile(source))


class PatternRegistry:
    """Process-wide cache mapping each pattern to its compiled matcher.

    Lookups of an already-built matcher are lock-free. The lock is held only
    while a missing matcher is built, and the cache is re-checked under the
    lock so concurrent first use still compiles once.
    """

    def __init__(self, compiler: Compiler = compile_regex) -> None:
        self._compiler = compiler
        self._matchers: dict[Pattern, Matcher] = {}
        self._failures: dict[Pattern, PatternCompileError] = {}
        self._lock = threading.Lock()
        self._build_count = 0

    @property
    def build_count(self) -> int:
        """Return how many compilations were attempted."""
        return self._build_count

    def __len__(self) -> int:
        return len(self._matchers)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._matchers

    def get_or_build(self, pattern: Pattern) -> Matcher:
        """Return the matcher for `pattern`, compiling it on first use.

        Args:
            pattern (Pattern): Pattern with its identity.

        Raises:
            PatternCompileError: If the pattern source is malformed. The failure
                is remembered and raised again on later lookups.

        Returns:
            Matcher: Shared matcher instance.
        """
        matcher = self._matchers.get(pattern)
        if matcher is not None:
            return matcher

        with self._lock:
            matcher = self._matchers.get(pattern)
            if matcher is not None:
                return matcher
            failure = self._failures.get(pattern)
            if failure is not None:
                raise failure

            self._build_count += 1
            try:
                matcher = self._compiler(pattern.source)
            except (re.error, ValueError) as exc:
                failure = PatternCompileError(
                    source=pattern.source,
                    type_name=pattern.type_name,
                    variant=pattern.variant,
                    index=pattern.index,
                    reason=str(exc),
                )
                self._failures[pattern] = failure
                raise failure from exc

            self._matchers[pattern] = matcher

        logger.debug(
            "Pattern compiled",
            extra={"type_name": pattern.type_name, "variant": pattern.variant, "index": pattern.index},
        )
        return matcher


_DEFAULT_REGISTRY = PatternRegistry()


def default_registry() -> PatternRegistry:
    """Return the registry shared by every parser that does not bring its own."""
    return _DEFAULT_REGISTRY
