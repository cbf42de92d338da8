from __future__ import annotations

import logging

from rematch import logger as package_logger
from rematch.logging import configure_logging, get_logger, resolve_log_level
from rematch.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(log_json=False, log_level="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_extra_mapping_is_flattened_into_json_payload(capsys) -> None:
    configure_logging(settings=Settings(log_json=True, log_level="INFO"), force=True)
    get_logger("tests").info("with extra", extra={"type_name": "Sample"})

    captured = capsys.readouterr()
    assert '"type_name": "Sample"' in captured.err
    assert '"message": "with extra"' in captured.err


def test_resolve_log_level() -> None:
    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level("nonsense") == logging.INFO


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))


def test_json_events_carry_logger_name_and_extra_does_not_override(capsys) -> None:
    configure_logging(settings=Settings(log_json=True, log_level="DEBUG"), force=True)
    get_logger("rematch.registry").debug("Pattern compiled", index=3, extra={"index": 9, "type_name": "T"})

    captured = capsys.readouterr()
    assert '"logger": "rematch.registry"' in captured.err
    assert '"index": 3' in captured.err
    assert '"type_name": "T"' in captured.err
