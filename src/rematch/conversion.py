"""Per-type string-to-value converters."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from rematch.exceptions import UnknownTypeError
from rematch.types import INTEGER_BOUNDS

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from rematch.typing.models import TypeRef
    from rematch.typing.protocol import Converter

_DIGITS = re.compile(r"[0-9]+")


def bounded_integer(name: str, low: int, high: int) -> Converter:
    """Build a strict integer converter for the range `[low, high]`.

    Only ASCII digits with an optional leading sign are accepted; whitespace
    and underscores are rejected. Digit strings longer than the bound are
    rejected before `int()` sees them, so arbitrarily long inputs still report
    overflow.

    Args:
        name (str): Type name, used for the converter name.
        low (int): Smallest accepted value.
        high (int): Largest accepted value.

    Returns:
        Converter: Converter raising `ValueError` on invalid or out-of-range input.
    """

    def convert(text: str) -> int:
        if not text:
            raise ValueError("cannot parse integer from empty string")  # noqa: TRY003
        negative = text[0] == "-"
        body = text[1:] if text[0] in "+-" else text
        if (negative and low >= 0) or not _DIGITS.fullmatch(body):
            raise ValueError("invalid digit found in string")  # noqa: TRY003
        digits = body.lstrip("0")
        if negative and len(digits) > len(str(-low)):
            raise ValueError("number too small to fit in target type")  # noqa: TRY003
        if not negative and len(digits) > len(str(high)):
            raise ValueError("number too large to fit in target type")  # noqa: TRY003
        value = -int(digits or "0") if negative else int(digits or "0")
        if value > high:
            raise ValueError("number too large to fit in target type")  # noqa: TRY003
        if value < low:
            raise ValueError("number too small to fit in target type")  # noqa: TRY003
        return value

    convert.__name__ = f"parse_{name}"
    return convert


def parse_bool(text: str) -> bool:
    """Accept exactly `true` or `false`."""
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError("provided string was not `true` or `false`")  # noqa: TRY003


def parse_char(text: str) -> str:
    """Accept exactly one character."""
    if not text:
        raise ValueError("cannot parse char from empty string")  # noqa: TRY003
    if len(text) > 1:
        raise ValueError("too many characters in string")  # noqa: TRY003
    return text


def parse_decimal(text: str) -> Decimal:
    """Parse a decimal literal."""
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"invalid decimal literal: {text!r}") from exc


def builtin_converters() -> dict[TypeRef, Converter]:
    """Return the converters available without registration.

    Returns:
        dict[TypeRef, Converter]: Converters keyed by type name and Python class.
    """
    converters: dict[TypeRef, Converter] = {
        "str": str,
        "String": str,
        "char": parse_char,
        "int": int,
        "float": float,
        "f32": float,
        "f64": float,
        "bool": parse_bool,
        "decimal": parse_decimal,
        str: str,
        int: int,
        float: float,
        bool: parse_bool,
        Decimal: parse_decimal,
    }
    for name, (low, high) in INTEGER_BOUNDS.items():
        converters[name] = bounded_integer(name, low, high)
    return converters


class ConverterRegistry:
    """Lookup of converters by declared field type."""

    def __init__(self, converters: Mapping[TypeRef, Converter] | None = None) -> None:
        self._converters: dict[TypeRef, Converter] = dict(converters or {})

    def __contains__(self, type_ref: object) -> bool:
        return type_ref in self._converters

    def copy(self) -> ConverterRegistry:
        """Return an independent registry with the same converters."""
        return ConverterRegistry(self._converters)

    def register(
        self,
        type_ref: TypeRef,
        converter: Converter | None = None,
    ) -> Any:  # noqa: ANN401
        """Register `converter` for `type_ref`.

        Usable directly or as a decorator when `converter` is omitted.

        Args:
            type_ref (TypeRef): Type name or Python class.
            converter (Converter | None): Conversion callable.

        Returns:
            Any: The converter, or a decorator registering one.
        """
        if converter is not None:
            self._converters[type_ref] = converter
            return converter

        def decorator(func: Callable[[str], Any]) -> Callable[[str], Any]:
            self._converters[type_ref] = func
            return func

        return decorator

    def resolve(self, type_ref: TypeRef) -> Converter:
        """Return the converter for `type_ref`.

        Classes without a registered converter fall back to their `from_str`
        classmethod, which is how rematch types nest inside each other.

        Args:
            type_ref (TypeRef): Type name or Python class.

        Raises:
            UnknownTypeError: If no converter can be found.

        Returns:
            Converter: Conversion callable.
        """
        converter = self._converters.get(type_ref)
        if converter is not None:
            return converter
        if isinstance(type_ref, type):
            from_str = getattr(type_ref, "from_str", None)
            if callable(from_str):
                return from_str
        raise UnknownTypeError(type_ref=type_ref)

    def convert(self, type_ref: TypeRef, text: str) -> Any:  # noqa: ANN401
        """Convert `text` according to `type_ref`."""
        return self.resolve(type_ref)(text)


_DEFAULT_CONVERTERS = ConverterRegistry(builtin_converters())


def default_converters() -> ConverterRegistry:
    """Return the converter registry shared by parsers that do not bring their own."""
    return _DEFAULT_CONVERTERS
