"""Match engine: drives patterns in declaration order and binds the first match."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rematch.binder import BindContext, bind
from rematch.conversion import default_converters
from rematch.exceptions import NoMatchError
from rematch.registry import default_registry
from rematch.typing.enums import DeclKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from rematch.conversion import ConverterRegistry
    from rematch.registry import PatternRegistry
    from rematch.typing.models import Candidate, EnumDecl, Shape, StructDecl


def _match_first(
    type_name: str,
    candidates: Iterable[Candidate],
    text: str,
    registry: PatternRegistry,
    converters: ConverterRegistry,
) -> Any:  # noqa: ANN401
    """Bind the first candidate whose pattern matches `text`.

    The first match wins unconditionally: a binding failure is raised as is
    and later candidates are not tried.
    """
    for candidate in candidates:
        captures = registry.get_or_build(candidate.pattern).find_captures(text)
        if captures is None:
            continue
        return bind(
            candidate.shape,
            captures,
            converters=converters,
            constructor=candidate.constructor,
            context=BindContext.from_pattern(candidate.pattern, text),
        )
    raise NoMatchError(input=text, type_name=type_name)


def parse(
    decl: StructDecl | EnumDecl,
    text: str,
    *,
    registry: PatternRegistry | None = None,
    converters: ConverterRegistry | None = None,
) -> Any:  # noqa: ANN401
    """Parse `text` into a value of the declared type.

    Struct patterns are tried in declaration order. Enum variants are tried in
    declaration order, and each variant's patterns in declaration order.
    Patterns match anywhere in the input.

    Args:
        decl (StructDecl | EnumDecl): Type declaration.
        text (str): Input string.
        registry (PatternRegistry | None): Matcher cache, defaults to the shared one.
        converters (ConverterRegistry | None): Converter lookup, defaults to the shared one.

    Raises:
        NoMatchError: If no pattern matches.
        BindError: If the first matching pattern cannot populate its fields.
        PatternCompileError: If a pattern reached during matching is malformed.

    Returns:
        Any: Parsed value.
    """
    return _match_first(
        decl.name,
        decl.iter_candidates(),
        text,
        registry if registry is not None else default_registry(),
        converters if converters is not None else default_converters(),
    )


def _iter_shapes(decl: StructDecl | EnumDecl) -> Iterator[Shape]:
    if decl.kind == DeclKind.STRUCT:
        yield decl.shape
        return
    for variant in decl.variants:
        yield variant.shape


class Parser:
    """Parser compiled from one type declaration."""

    def __init__(
        self,
        decl: StructDecl | EnumDecl,
        *,
        registry: PatternRegistry | None = None,
        converters: ConverterRegistry | None = None,
    ) -> None:
        """Prepare the candidate list and check every field type resolves.

        Raises:
            UnknownTypeError: If a field type has no converter.
        """
        self._decl = decl
        self._registry = registry if registry is not None else default_registry()
        self._converters = converters if converters is not None else default_converters()
        self._candidates: tuple[Candidate, ...] = tuple(decl.iter_candidates())
        for shape in _iter_shapes(decl):
            for field in shape.fields:
                self._converters.resolve(field.type_ref)

    @property
    def decl(self) -> StructDecl | EnumDecl:
        """Return the declaration this parser was built from."""
        return self._decl

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        """Return patterns in matching order."""
        return self._candidates

    def compile(self) -> Parser:
        """Compile every pattern now instead of on first use.

        Raises:
            PatternCompileError: If any pattern is malformed.

        Returns:
            Parser: This parser.
        """
        for candidate in self._candidates:
            self._registry.get_or_build(candidate.pattern)
        return self

    def parse(self, text: str) -> Any:  # noqa: ANN401
        """Parse `text`, see `rematch.engine.parse`."""
        return _match_first(self._decl.name, self._candidates, text, self._registry, self._converters)

    __call__ = parse

    def __repr__(self) -> str:
        return f"Parser({self._decl.kind}:{self._decl.name}, patterns={len(self._candidates)})"


def compile_parser(
    decl: StructDecl | EnumDecl,
    *,
    registry: PatternRegistry | None = None,
    converters: ConverterRegistry | None = None,
    eager: bool = False,
) -> Parser:
    """Build a parser for `decl`.

    Args:
        decl (StructDecl | EnumDecl): Type declaration.
        registry (PatternRegistry | None): Matcher cache.
        converters (ConverterRegistry | None): Converter lookup.
        eager (bool): Compile every pattern immediately.

    Returns:
        Parser: Ready parser.
    """
    parser = Parser(decl, registry=registry, converters=converters)
    if eager:
        parser.compile()
    return parser
