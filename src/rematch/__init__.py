"""Rematch package: regex-driven parsers for declared structs and enums."""

from rematch.binder import BindContext, bind
from rematch.conversion import ConverterRegistry, default_converters
from rematch.engine import Parser, compile_parser, parse
from rematch.exceptions import (
    BindError,
    FieldConversionError,
    MissingGroupError,
    NoMatchError,
    PackageError,
    ParseError,
    PatternCompileError,
    SchemaError,
    SchemaStoreError,
    SettingsError,
    UnknownTypeError,
)
from rematch.frontend import rematch, rematch_enum, variant
from rematch.logging import configure_logging, get_logger
from rematch.registry import PatternRegistry, RegexMatcher, compile_regex, default_registry
from rematch.settings import Settings, get_settings
from rematch.typing.models import EnumDecl, FieldDecl, ParsedValue, Pattern, Shape, StructDecl, Variant

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("rematch")

__all__ = [
    "BindContext",
    "BindError",
    "ConverterRegistry",
    "EnumDecl",
    "FieldConversionError",
    "FieldDecl",
    "MissingGroupError",
    "NoMatchError",
    "PackageError",
    "ParseError",
    "ParsedValue",
    "Parser",
    "Pattern",
    "PatternCompileError",
    "PatternRegistry",
    "RegexMatcher",
    "SchemaError",
    "SchemaStoreError",
    "Settings",
    "SettingsError",
    "Shape",
    "StructDecl",
    "UnknownTypeError",
    "Variant",
    "__version__",
    "bind",
    "compile_parser",
    "compile_regex",
    "configure_logging",
    "default_converters",
    "default_registry",
    "get_logger",
    "get_settings",
    "logger",
    "parse",
    "rematch",
    "rematch_enum",
    "variant",
]
