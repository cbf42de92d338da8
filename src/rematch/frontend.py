"""Decorator front-end turning dataclasses into rematch declarations.

Structs::

    @rematch(r"a number (\\d+) with some string ([abc]+)")
    @dataclass
    class Sample:
        a: usize
        s: str

Enums are classes whose nested classes are decorated with `variant`; variant
order is the order of the class body::

    @rematch_enum
    class Command:
        @variant(r"a")
        class A: ...

        @variant(r"b (\\d+)", positional=True)
        @dataclass
        class B:
            value: usize

Both attach a `from_str` classmethod, so decorated types can be used as field
types of other decorated types. Field-less plain classes are turned into frozen
dataclasses, so two parses of the same unit variant compare equal.
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from typing import TYPE_CHECKING, Any, NewType, TypeVar

from pydantic import ValidationError

from rematch.engine import compile_parser
from rematch.exceptions import SchemaError
from rematch.logging import get_logger
from rematch.typing.models import EnumDecl, Shape, StructDecl, Variant

if TYPE_CHECKING:
    from collections.abc import Callable

    from rematch.conversion import ConverterRegistry
    from rematch.engine import Parser
    from rematch.registry import PatternRegistry
    from rematch.typing.models import TypeRef

logger = get_logger(__name__)

T = TypeVar("T")

DECL_ATTR = "__rematch_decl__"
PARSER_ATTR = "__rematch_parser__"
_VARIANT_ATTR = "__rematch_variant__"


@dataclasses.dataclass(frozen=True)
class _VariantSpec:
    patterns: tuple[str, ...]
    positional: bool


def _type_ref(annotation: object, owner: type, field_name: str) -> TypeRef:
    """Translate a field annotation into a converter lookup key.

    Args:
        annotation (object): Resolved annotation.
        owner (type): Class declaring the field.
        field_name (str): Field name.

    Raises:
        SchemaError: If the annotation is neither a class nor a `NewType`.

    Returns:
        TypeRef: Type name for `NewType` aliases, else the class itself.
    """
    if isinstance(annotation, NewType):
        return annotation.__name__
    if isinstance(annotation, type):
        return annotation
    raise SchemaError(
        message=f"Unsupported annotation {annotation!r} for field '{field_name}' of {owner.__qualname__}",
    )


def shape_of(cls: type, *, positional: bool = False) -> Shape:
    """Derive the shape of a dataclass from its init fields.

    A plain class without annotations has a unit shape.

    Args:
        cls (type): Dataclass, or plain class for a unit shape.
        positional (bool): Report fields by index instead of by name.

    Raises:
        SchemaError: If the class cannot be described as a shape.

    Returns:
        Shape: Field layout.
    """
    if not dataclasses.is_dataclass(cls):
        if inspect.get_annotations(cls):
            raise SchemaError(message=f"{cls.__qualname__} declares fields but is not a dataclass")
        return Shape.unit()

    try:
        hints = typing.get_type_hints(cls)
    except NameError as exc:
        raise SchemaError(message=f"Cannot resolve annotations of {cls.__qualname__}: {exc}") from exc

    fields = [field for field in dataclasses.fields(cls) if field.init]
    if not fields:
        return Shape.unit()

    type_refs = {field.name: _type_ref(hints[field.name], cls, field.name) for field in fields}
    try:
        if positional:
            return Shape.positional(*type_refs.values())
        return Shape.named(**type_refs)
    except ValidationError as exc:
        raise SchemaError(message=f"Invalid shape for {cls.__qualname__}: {exc}") from exc


def _with_value_equality(cls: type[T]) -> type[T]:
    """Make a field-less plain class a frozen dataclass so parsed unit values compare equal."""
    if dataclasses.is_dataclass(cls):
        return cls
    return dataclasses.dataclass(frozen=True)(cls)


def _from_str(cls: type, text: str) -> Any:  # noqa: ANN401
    parser: Parser = getattr(cls, PARSER_ATTR)
    return parser.parse(text)


def _attach(
    cls: type[T],
    decl: StructDecl | EnumDecl,
    *,
    registry: PatternRegistry | None,
    converters: ConverterRegistry | None,
    eager: bool,
) -> type[T]:
    parser = compile_parser(decl, registry=registry, converters=converters, eager=eager)
    setattr(cls, DECL_ATTR, decl)
    setattr(cls, PARSER_ATTR, parser)
    setattr(cls, "from_str", classmethod(_from_str))  # noqa: B010
    logger.debug("Registered rematch type", extra={"type_name": decl.name, "kind": decl.kind})
    return cls


def rematch(
    *patterns: str,
    positional: bool = False,
    registry: PatternRegistry | None = None,
    converters: ConverterRegistry | None = None,
    eager: bool = False,
) -> Callable[[type[Any]], type[Any]]:
    """Declare a struct parsed by `patterns`, tried in order.

    Args:
        *patterns (str): Regular expressions; group `i + 1` binds field `i`.
        positional (bool): Report fields by index instead of by name.
        registry (PatternRegistry | None): Matcher cache.
        converters (ConverterRegistry | None): Converter lookup.
        eager (bool): Compile the patterns at decoration time.

    Returns:
        Callable[[type[Any]], type[Any]]: Class decorator.
    """

    def decorate(cls: type[T]) -> type[T]:
        shape = shape_of(cls, positional=positional)
        cls = _with_value_equality(cls)
        decl = StructDecl(
            name=cls.__qualname__,
            shape=shape,
            patterns=patterns,
            constructor=cls,
        )
        return _attach(cls, decl, registry=registry, converters=converters, eager=eager)

    return decorate


def variant(*patterns: str, positional: bool = False) -> Callable[[type[T]], type[T]]:
    """Mark a nested class as an enum variant parsed by `patterns`.

    A variant without patterns is accepted and never matches.

    Args:
        *patterns (str): Regular expressions, tried in order.
        positional (bool): Report fields by index instead of by name.

    Returns:
        Callable[[type[T]], type[T]]: Class decorator.
    """

    def decorate(cls: type[T]) -> type[T]:
        setattr(cls, _VARIANT_ATTR, _VariantSpec(patterns=patterns, positional=positional))
        return cls

    return decorate


def rematch_enum(
    cls: type[T] | None = None,
    *,
    registry: PatternRegistry | None = None,
    converters: ConverterRegistry | None = None,
    eager: bool = False,
) -> Any:  # noqa: ANN401
    """Declare an enum whose variants are the nested `variant` classes.

    Usable bare (`@rematch_enum`) or with options (`@rematch_enum(eager=True)`).

    Args:
        cls (type[T] | None): Enum class when used bare.
        registry (PatternRegistry | None): Matcher cache.
        converters (ConverterRegistry | None): Converter lookup.
        eager (bool): Compile the patterns at decoration time.

    Returns:
        Any: The decorated class, or a decorator when called with options.
    """

    def decorate(enum_cls: type[T]) -> type[T]:
        variants: list[Variant] = []
        for name, member in list(vars(enum_cls).items()):
            if not isinstance(member, type) or _VARIANT_ATTR not in vars(member):
                continue
            spec: _VariantSpec = vars(member)[_VARIANT_ATTR]
            shape = shape_of(member, positional=spec.positional)
            variants.append(
                Variant(
                    name=name,
                    shape=shape,
                    patterns=spec.patterns,
                    constructor=_with_value_equality(member),
                ),
            )
        decl = EnumDecl(name=enum_cls.__qualname__, variants=tuple(variants))
        return _attach(enum_cls, decl, registry=registry, converters=converters, eager=eager)

    if cls is not None:
        return decorate(cls)
    return decorate
