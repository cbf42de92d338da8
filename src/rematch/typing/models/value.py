"""Values assembled by the field binder."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ParsedValue(BaseModel):
    """Value built for a declaration that carries no constructor.

    `values` is a mapping for named shapes, a tuple for positional shapes and
    `None` for unit shapes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type_name: str
    variant: str | None = None
    values: dict[str, Any] | tuple[Any, ...] | None = None

    def __getitem__(self, key: str | int) -> Any:  # noqa: ANN401
        """Return a field value by name or position."""
        if self.values is None:
            raise KeyError(key)
        return self.values[key]  # type: ignore[index]
