"""Pytest marker auto-assignment by folder and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from rematch import logger
from rematch.conversion import ConverterRegistry, builtin_converters
from rematch.registry import PatternRegistry
from rematch.typing.models import EnumDecl, Shape, StructDecl, Variant


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@pytest.fixture
def registry() -> PatternRegistry:
    """Fresh matcher cache isolated from the process-wide one."""
    return PatternRegistry()


@pytest.fixture
def converters() -> ConverterRegistry:
    """Fresh converter registry with the built-in converters."""
    return ConverterRegistry(builtin_converters())


@pytest.fixture
def command_enum() -> EnumDecl:
    """Enum with a unit, a positional and a named variant."""
    return EnumDecl(
        name="Test",
        variants=(
            Variant(name="A", patterns=(r"a",)),
            Variant(name="B", shape=Shape.positional("usize"), patterns=(r"b (\d+)",)),
            Variant(name="C", shape=Shape.named(x="usize"), patterns=(r"c = (\d+)",)),
        ),
    )


@pytest.fixture
def sample_struct() -> StructDecl:
    """Struct with a named integer field and a named string field."""
    return StructDecl(
        name="Test",
        shape=Shape.named(a="usize", s="str"),
        patterns=(r"a number (\d+) with some string ([abc]+)",),
    )
