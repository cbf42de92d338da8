from __future__ import annotations

import pytest

from rematch import typing as rematch_typing
from rematch.typing.enums import DeclKind, ShapeKind


def test_shape_kind_from_str() -> None:
    assert ShapeKind.from_str("positional") == ShapeKind.POSITIONAL


def test_shape_kind_from_str_lists_supported_values() -> None:
    with pytest.raises(ValueError, match="Expected one of: unit, named, positional"):
        ShapeKind.from_str("tuple")


def test_decl_kind_to_str() -> None:
    assert DeclKind.ENUM.to_str() == "enum"
    assert DeclKind.STRUCT == "struct"


def test_enums_are_exported_from_typing_package() -> None:
    assert rematch_typing.ShapeKind is ShapeKind
    assert rematch_typing.DeclKind is DeclKind
