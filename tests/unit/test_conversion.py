from __future__ import annotations

from decimal import Decimal

import pytest

from rematch.conversion import ConverterRegistry, bounded_integer, default_converters
from rematch.exceptions import UnknownTypeError
from rematch.typing.enums import ShapeKind


@pytest.mark.parametrize(
    ("type_name", "text", "expected"),
    [
        ("usize", "42", 42),
        ("usize", "+7", 7),
        ("u8", "255", 255),
        ("i8", "-128", -128),
        ("i64", "-9223372036854775808", -(2**63)),
        ("u128", "340282366920938463463374607431768211455", 2**128 - 1),
        ("u8", "0" * 5000 + "7", 7),
        ("i8", "-000128", -128),
    ],
)
def test_bounded_integers_accept_in_range_values(converters, type_name: str, text: str, expected: int) -> None:
    assert converters.convert(type_name, text) == expected


@pytest.mark.parametrize(
    ("type_name", "text", "message"),
    [
        ("usize", "", "cannot parse integer from empty string"),
        ("usize", "12a", "invalid digit found in string"),
        ("usize", " 12", "invalid digit found in string"),
        ("usize", "1_000", "invalid digit found in string"),
        ("usize", "-1", "invalid digit found in string"),
        ("i32", "-", "invalid digit found in string"),
        ("usize", "999999999999999999999999999", "number too large to fit in target type"),
        ("u8", "256", "number too large to fit in target type"),
        ("i8", "-129", "number too small to fit in target type"),
        ("usize", "9" * 5000, "number too large to fit in target type"),
        ("u128", "1" * 5000, "number too large to fit in target type"),
        ("i64", "-" + "9" * 5000, "number too small to fit in target type"),
    ],
)
def test_bounded_integers_reject_invalid_values(converters, type_name: str, text: str, message: str) -> None:
    with pytest.raises(ValueError) as exc_info:
        converters.convert(type_name, text)

    assert str(exc_info.value) == message


def test_bounded_integer_converter_is_named() -> None:
    assert bounded_integer("u16", 0, 65535).__name__ == "parse_u16"


def test_builtin_python_types(converters) -> None:
    assert converters.convert(int, "-12") == -12
    assert converters.convert("int", "999999999999999999999999999") == 999999999999999999999999999
    assert converters.convert(str, " keep ") == " keep "
    assert converters.convert(float, "1.5") == 1.5
    assert converters.convert("decimal", "1.10") == Decimal("1.10")
    assert converters.convert(bool, "true") is True
    assert converters.convert("bool", "false") is False


def test_named_scalar_types(converters) -> None:
    assert converters.convert("f64", "1.5") == 1.5
    assert converters.convert("f32", "-2") == -2.0
    assert converters.convert("String", "text") == "text"
    assert converters.convert("char", "x") == "x"


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("", "cannot parse char from empty string"),
        ("xy", "too many characters in string"),
    ],
)
def test_char_requires_exactly_one_character(converters, text: str, message: str) -> None:
    with pytest.raises(ValueError) as exc_info:
        converters.convert("char", text)

    assert str(exc_info.value) == message


def test_bool_rejects_other_spellings(converters) -> None:
    with pytest.raises(ValueError, match="not `true` or `false`"):
        converters.convert(bool, "True")


def test_decimal_rejects_garbage(converters) -> None:
    with pytest.raises(ValueError, match="invalid decimal literal"):
        converters.convert(Decimal, "twelve")


def test_class_with_from_str_is_resolved(converters) -> None:
    assert converters.convert(ShapeKind, "named") == ShapeKind.NAMED


def test_unknown_type_raises(converters) -> None:
    with pytest.raises(UnknownTypeError) as exc_info:
        converters.resolve("nope")

    assert exc_info.value.type_ref == "nope"


def test_register_directly_and_as_decorator(converters) -> None:
    converters.register("upper", str.upper)

    @converters.register("csv")
    def _split(text: str) -> list[str]:
        return text.split(",")

    assert converters.convert("upper", "abc") == "ABC"
    assert converters.convert("csv", "a,b") == ["a", "b"]
    assert "csv" in converters


def test_copy_is_independent(converters) -> None:
    clone = converters.copy()
    clone.register("only-in-clone", str)

    assert "only-in-clone" in clone
    assert "only-in-clone" not in converters


def test_default_converters_are_shared() -> None:
    assert default_converters() is default_converters()
    assert "usize" in default_converters()
    assert isinstance(default_converters(), ConverterRegistry)
