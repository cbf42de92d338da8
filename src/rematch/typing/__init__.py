"""Typing-centric domain modules."""

from rematch.typing.enums import DeclKind, ShapeKind
from rematch.typing.models import (
    EnumDecl,
    FieldDecl,
    ParsedValue,
    Pattern,
    SchemaDocument,
    Shape,
    StructDecl,
    TypeDecl,
    TypeRef,
    Variant,
)
from rematch.typing.protocol import Compiler, Converter, Matcher

__all__ = [
    "Compiler",
    "Converter",
    "DeclKind",
    "EnumDecl",
    "FieldDecl",
    "Matcher",
    "ParsedValue",
    "Pattern",
    "SchemaDocument",
    "Shape",
    "ShapeKind",
    "StructDecl",
    "TypeDecl",
    "TypeRef",
    "Variant",
]
