"""CLI entry point for rematch."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from pydantic import BaseModel

from rematch import __version__, logger
from rematch.engine import compile_parser
from rematch.exceptions import PackageError, ParseError, SchemaStoreError
from rematch.logging import configure_logging
from rematch.schema_store import SchemaStore
from rematch.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rematch.engine import Parser
    from rematch.settings import Settings
    from rematch.typing.models import EnumDecl, SchemaDocument, StructDecl


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="rematch")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    parse_parser = subparsers.add_parser("parse", help="Parse input strings with a declared type")
    parse_parser.add_argument("--schema", type=Path, default=None, dest="schema_path")
    parse_parser.add_argument("--type", required=True, dest="type_name")
    parse_parser.add_argument("texts", nargs="*", help="Inputs to parse; stdin lines when omitted")

    check_parser = subparsers.add_parser("check", help="Compile every pattern of a schema file")
    check_parser.add_argument("--schema", type=Path, required=True, dest="schema_path")

    return parser


def _to_payload(value: Any) -> Any:  # noqa: ANN401
    """Convert a parsed value into JSON-compatible data.

    Args:
        value (Any): Parsed value.

    Returns:
        Any: JSON-compatible payload.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if hasattr(value, "__dataclass_fields__"):
        return asdict(value)
    return value


def _error_payload(exc: ParseError) -> dict[str, object]:
    """Describe a parse error as JSON-compatible data.

    Args:
        exc (ParseError): Raised parse error.

    Returns:
        dict[str, object]: Error kind, message and structured fields.
    """
    return {**asdict(exc), "kind": type(exc).__name__, "message": str(exc)}


def _resolve_decl(
    type_name: str,
    schema_path: Path | None,
    settings: Settings,
) -> StructDecl | EnumDecl:
    """Find the declaration to parse with.

    Args:
        type_name (str): Declared type name.
        schema_path (Path | None): Explicit schema file, else the schema directory is searched.
        settings (Settings): Runtime settings.

    Raises:
        SchemaStoreError: If the type cannot be found.

    Returns:
        StructDecl | EnumDecl: Declaration.
    """
    if schema_path is not None:
        decl = SchemaStore.load(schema_path).get(type_name)
        where = str(schema_path)
    else:
        decl = SchemaStore(root=settings.schema_path).find_type(type_name)
        where = settings.schema_dir
    if decl is None:
        raise SchemaStoreError(message=f"Type '{type_name}' not found in {where}")
    return decl


def run_parse(parser: Parser, texts: Iterable[str], out: TextIO) -> int:
    """Parse each input and write one JSON line per input.

    Args:
        parser (Parser): Compiled parser.
        texts (Iterable[str]): Inputs.
        out (TextIO): Output stream.

    Returns:
        int: 0 when every input parsed, else 1.
    """
    exit_code = 0
    for text in texts:
        try:
            value = parser.parse(text)
        except ParseError as exc:
            exit_code = 1
            record: dict[str, object] = {"input": text, "ok": False, "error": _error_payload(exc)}
        else:
            record = {"input": text, "ok": True, "value": _to_payload(value)}
        out.write(json.dumps(record, default=str) + "\n")
    return exit_code


def run_check(document: SchemaDocument) -> int:
    """Build a parser for every type and compile all patterns.

    Args:
        document (SchemaDocument): Loaded schema.

    Returns:
        int: 0 when every type is valid, else 1.
    """
    exit_code = 0
    for decl in document.types:
        try:
            parser = compile_parser(decl, eager=True)
        except PackageError as exc:
            exit_code = 1
            logger.error("Invalid type declaration", extra={"type_name": decl.name, "error": str(exc)})  # noqa: TRY400
            continue
        logger.info("Type declaration ok", extra={"type_name": decl.name, "patterns": len(parser.candidates)})
    return exit_code


def _iter_stdin_lines(stream: TextIO) -> Iterable[str]:
    for line in stream:
        yield line.rstrip("\r\n")


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, defaults to `sys.argv[1:]`.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in {"parse", "check"}:
        parser.print_help()
        return 0

    try:
        if args.command == "check":
            return run_check(SchemaStore.load(args.schema_path))

        decl = _resolve_decl(args.type_name, args.schema_path, settings)
        type_parser = compile_parser(decl, eager=settings.eager_compile)
        texts = args.texts or _iter_stdin_lines(sys.stdin)
        return run_parse(type_parser, texts, sys.stdout)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
