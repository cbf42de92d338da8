"""Core domain model exports."""

from rematch.typing.models.schema import (
    Candidate,
    Constructor,
    EnumDecl,
    FieldDecl,
    Pattern,
    SchemaDocument,
    Shape,
    StructDecl,
    TypeDecl,
    TypeRef,
    Variant,
)
from rematch.typing.models.value import ParsedValue

__all__ = [
    "Candidate",
    "Constructor",
    "EnumDecl",
    "FieldDecl",
    "ParsedValue",
    "Pattern",
    "SchemaDocument",
    "Shape",
    "StructDecl",
    "TypeDecl",
    "TypeRef",
    "Variant",
]
