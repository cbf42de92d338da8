"""Schema file loading and lookup utilities."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rematch.exceptions import SchemaStoreError
from rematch.logging import get_logger
from rematch.typing.models import EnumDecl, SchemaDocument, StructDecl

logger = get_logger(__name__)

_SCHEMA_FILE_VERSION = 1
_SCHEMA_SUFFIX = ".schema.json"


class SchemaStore(BaseModel):
    """Filesystem-based store of schema documents."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root: Path = Field(description="Schema directory root.")

    def schema_path(self, schema_name: str) -> Path:
        """Build the file path used to save a schema document.

        Args:
            schema_name (str): Schema name.

        Returns:
            Path: Schema file path.
        """
        safe_name = re.sub(r"[^a-z0-9._-]+", "-", schema_name.lower()).strip("-")
        if not safe_name:
            safe_name = "schema"
        return self.root / f"{safe_name}{_SCHEMA_SUFFIX}"

    @staticmethod
    def load(path: Path) -> SchemaDocument:
        """Load a schema document from path.

        Args:
            path (Path): Schema file path.

        Raises:
            SchemaStoreError: If the file cannot be read, is not UTF-8 JSON or is not a valid schema.

        Returns:
            SchemaDocument: Loaded schema.
        """
        _validate_schema_file_path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            document = SchemaDocument.model_validate(_migrate_schema_payload(payload))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise SchemaStoreError(message=f"Invalid schema file {path}: {exc}") from exc
        logger.info("Schema loaded", extra={"schema_path": str(path), "types": len(document.types)})
        return document

    def save(self, document: SchemaDocument) -> Path:
        """Persist a schema document to the store.

        Args:
            document (SchemaDocument): Schema payload.

        Returns:
            Path: Written file path.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.schema_path(document.name)
        envelope = {
            "schema_file_version": _SCHEMA_FILE_VERSION,
            "schema": document.model_dump(mode="json", by_alias=True),
        }
        path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        logger.info("Schema saved", extra={"schema_path": str(path)})
        return path

    def list_schemas(self) -> list[Path]:
        """List schema files.

        Returns:
            list[Path]: Schema files, sorted by name.
        """
        if not self.root.is_dir():
            return []
        return sorted(self.root.glob(f"*{_SCHEMA_SUFFIX}"))

    def find_type(self, type_name: str) -> StructDecl | EnumDecl | None:
        """Return the first declaration named `type_name` across stored schemas.

        Args:
            type_name (str): Declared type name.

        Returns:
            StructDecl | EnumDecl | None: Declaration, or None when absent.
        """
        for path in self.list_schemas():
            decl = self.load(path).get(type_name)
            if decl is not None:
                return decl
        return None


def _migrate_patterns(entry: dict[str, object]) -> dict[str, object]:
    """Accept a singular `pattern` key in place of `patterns`."""
    migrated = dict(entry)
    if "pattern" in migrated and "patterns" not in migrated:
        migrated["patterns"] = [migrated.pop("pattern")]
    return migrated


def _migrate_type_entry(entry: object) -> object:
    """Fill in the declaration kind and migrate pattern keys of one type entry.

    Args:
        entry (object): Raw type entry.

    Returns:
        object: Migrated entry, or the input unchanged when not a JSON object.
    """
    if not isinstance(entry, dict):
        return entry
    migrated = _migrate_patterns(cast("dict[str, object]", entry))
    if "kind" not in migrated:
        migrated["kind"] = "enum" if "variants" in migrated else "struct"
    variants = migrated.get("variants")
    if isinstance(variants, list):
        migrated["variants"] = [
            _migrate_patterns(cast("dict[str, object]", variant)) if isinstance(variant, dict) else variant
            for variant in variants
        ]
    return migrated


def _migrate_schema_payload(payload: object) -> dict[str, object]:
    """Migrate schema payload from file format versions to current model format.

    Args:
        payload (object): Raw JSON payload.

    Raises:
        SchemaStoreError: If payload is not a JSON object.

    Returns:
        dict[str, object]: Migrated schema object payload.
    """
    if not isinstance(payload, dict):
        raise SchemaStoreError(message="Schema payload must be a JSON object")

    payload_obj = cast("dict[str, object]", payload)
    schema_object = payload_obj
    embedded_schema = payload_obj.get("schema")
    if isinstance(embedded_schema, dict):
        schema_object = cast("dict[str, object]", embedded_schema)

    migrated = dict(schema_object)
    types = migrated.get("types")
    if isinstance(types, list):
        migrated["types"] = [_migrate_type_entry(entry) for entry in types]
    return migrated


def _validate_schema_file_path(path: Path) -> None:
    """Validate schema file path before loading.

    Args:
        path (Path): Schema file path.

    Raises:
        SchemaStoreError: If path is not a `pathlib.Path` or not a readable schema JSON file.
    """
    if not isinstance(path, Path):
        raise SchemaStoreError(message=f"Schema path must be a pathlib.Path instance, got: {type(path)!r}")
    if not path.is_file():
        raise SchemaStoreError(message=f"Schema path is not a file: {path}")
    if not path.name.endswith(_SCHEMA_SUFFIX):
        raise SchemaStoreError(message=f"Schema path must end with '{_SCHEMA_SUFFIX}': {path}")
