"""Positional binding of capture groups onto shape fields."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from rematch.conversion import default_converters
from rematch.exceptions import FieldConversionError, MissingGroupError
from rematch.typing.enums import ShapeKind
from rematch.typing.models import ParsedValue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rematch.conversion import ConverterRegistry
    from rematch.typing.models import Constructor, Pattern, Shape


@dataclass(frozen=True)
class BindContext:
    """Identity of the match being bound, copied into raised errors."""

    type_name: str = ""
    variant: str | None = None
    pattern_index: int | None = None
    input: str | None = None

    @classmethod
    def from_pattern(cls, pattern: Pattern, text: str) -> BindContext:
        """Build the context for a match of `pattern` against `text`."""
        return cls(
            type_name=pattern.type_name,
            variant=pattern.variant,
            pattern_index=pattern.index,
            input=text,
        )


def bind(
    shape: Shape,
    captures: Sequence[str | None],
    *,
    converters: ConverterRegistry | None = None,
    constructor: Constructor | None = None,
    context: BindContext | None = None,
) -> Any:  # noqa: ANN401
    """Convert captured groups into field values and assemble the result.

    Field `i` reads capture group `i + 1`; group 0 and any group past the last
    field are ignored. Nothing is constructed unless every field converts.

    Args:
        shape (Shape): Field layout to populate.
        captures (Sequence[str | None]): Whole match followed by each group.
        converters (ConverterRegistry | None): Converter lookup, defaults to the
            shared registry.
        constructor (Constructor | None): Callable building the final value.
            Named fields are passed as keywords, positional fields in order.
        context (BindContext | None): Match identity reported in errors.

    Raises:
        MissingGroupError: If a field's group is absent from the match.
        FieldConversionError: If a field's converter rejects its substring.

    Returns:
        Any: Constructed value, or a `ParsedValue` without a constructor.
    """
    converters = converters if converters is not None else default_converters()
    context = context or BindContext()

    if shape.kind == ShapeKind.UNIT:
        if constructor is not None:
            return constructor()
        return ParsedValue(type_name=context.type_name, variant=context.variant)

    values: list[Any] = []
    for index, field in enumerate(shape.fields):
        group = index + 1
        text = captures[group] if group < len(captures) else None
        if text is None:
            raise MissingGroupError(index=index, **asdict(context))

        converter = converters.resolve(field.type_ref)
        try:
            values.append(converter(text))
        except ValueError as exc:
            raise FieldConversionError(
                field=shape.field_label(index),
                message=str(exc),
                **asdict(context),
            ) from exc

    if shape.kind == ShapeKind.NAMED:
        named = {field.name: value for field, value in zip(shape.fields, values, strict=True)}
        if constructor is not None:
            return constructor(**named)
        return ParsedValue(type_name=context.type_name, variant=context.variant, values=named)

    if constructor is not None:
        return constructor(*values)
    return ParsedValue(type_name=context.type_name, variant=context.variant, values=tuple(values))
