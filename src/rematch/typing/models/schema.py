"""Schema-centric domain models."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Annotated, Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from rematch.typing.enums import ShapeKind

TypeRef = str | type[Any]
Constructor = Callable[..., Any]


class FieldDecl(BaseModel):
    """Single field of a shape."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str | None = None
    type_ref: TypeRef = Field(alias="type")

    @field_serializer("type_ref")
    def _serialize_type_ref(self, value: TypeRef) -> str:
        return value if isinstance(value, str) else value.__name__


class Shape(BaseModel):
    """Ordered field layout of a struct or enum variant."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: ShapeKind = ShapeKind.UNIT
    fields: tuple[FieldDecl, ...] = ()

    @model_validator(mode="after")
    def _validate_fields(self) -> Shape:
        """Check field naming against the shape kind.

        Raises:
            ValueError: If fields do not fit the shape kind.

        Returns:
            Shape: Validated shape.
        """
        if self.kind == ShapeKind.UNIT and self.fields:
            raise ValueError("Unit shape cannot declare fields")  # noqa: TRY003
        names = [field.name for field in self.fields]
        if self.kind == ShapeKind.NAMED:
            if any(name is None for name in names):
                raise ValueError("Named shape fields require a name")  # noqa: TRY003
            if len(set(names)) != len(names):
                raise ValueError(f"Duplicate field names in named shape: {names}")
        if self.kind == ShapeKind.POSITIONAL and any(name is not None for name in names):
            raise ValueError("Positional shape fields cannot be named")  # noqa: TRY003
        return self

    @classmethod
    def unit(cls) -> Shape:
        """Build a shape without fields."""
        return cls(kind=ShapeKind.UNIT)

    @classmethod
    def named(cls, /, **fields: TypeRef) -> Shape:
        """Build a named shape, keeping keyword order as field order."""
        return cls(
            kind=ShapeKind.NAMED,
            fields=tuple(FieldDecl(name=name, type_ref=type_ref) for name, type_ref in fields.items()),
        )

    @classmethod
    def positional(cls, *type_refs: TypeRef) -> Shape:
        """Build a positional shape from field types in order."""
        return cls(
            kind=ShapeKind.POSITIONAL,
            fields=tuple(FieldDecl(type_ref=type_ref) for type_ref in type_refs),
        )

    def field_label(self, index: int) -> str | int:
        """Return the identity used to report field `index` in errors.

        Args:
            index (int): 0-based field position.

        Returns:
            str | int: Field name for named shapes, else the index.
        """
        name = self.fields[index].name
        return index if name is None else name


class Pattern(BaseModel):
    """Pattern source plus its stable identity within the owning declaration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str
    type_name: str
    variant: str | None = None
    index: int = 0


class Candidate(NamedTuple):
    """One pattern to try, with the shape and constructor it binds to."""

    pattern: Pattern
    shape: Shape
    constructor: Constructor | None


class Variant(BaseModel):
    """Named alternative of an enum."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    shape: Shape = Field(default_factory=Shape)
    patterns: tuple[str, ...] = ()
    constructor: Constructor | None = Field(default=None, exclude=True)


class StructDecl(BaseModel):
    """Struct declaration: one shape, usually one pattern."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["struct"] = "struct"
    name: str
    shape: Shape = Field(default_factory=Shape)
    patterns: tuple[str, ...] = ()
    constructor: Constructor | None = Field(default=None, exclude=True)

    def iter_candidates(self) -> Iterator[Candidate]:
        """Yield patterns in declaration order."""
        for index, source in enumerate(self.patterns):
            pattern = Pattern(source=source, type_name=self.name, index=index)
            yield Candidate(pattern, self.shape, self.constructor)


class EnumDecl(BaseModel):
    """Enum declaration: ordered variants, each with its own patterns."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["enum"] = "enum"
    name: str
    variants: tuple[Variant, ...] = ()

    @model_validator(mode="after")
    def _validate_variants(self) -> EnumDecl:
        names = [variant.name for variant in self.variants]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate variant names in enum {self.name}: {names}")
        return self

    def iter_candidates(self) -> Iterator[Candidate]:
        """Yield patterns variant by variant, each in declaration order."""
        for variant in self.variants:
            for index, source in enumerate(variant.patterns):
                pattern = Pattern(source=source, type_name=self.name, variant=variant.name, index=index)
                yield Candidate(pattern, variant.shape, variant.constructor)


TypeDecl = Annotated[StructDecl | EnumDecl, Field(discriminator="kind")]


class SchemaDocument(BaseModel):
    """Collection of type declarations loaded from one schema file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = "schema"
    types: tuple[TypeDecl, ...] = ()

    @model_validator(mode="after")
    def _validate_type_names(self) -> SchemaDocument:
        names = [decl.name for decl in self.types]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate type names in schema {self.name}: {names}")
        return self

    def get(self, type_name: str) -> StructDecl | EnumDecl | None:
        """Return the declaration named `type_name`, if any."""
        return next((decl for decl in self.types if decl.name == type_name), None)
