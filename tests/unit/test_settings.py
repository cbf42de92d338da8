from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from rematch.exceptions import SettingsError
from rematch.settings import Settings, ensure_env_file_exists, get_settings


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_payload = (
        "APP_ENV=test\n"
        "LOG_LEVEL=debug\n"
        "LOG_JSON=false\n"
        "SCHEMA_DIR=my-schemas\n"
        "EAGER_COMPILE=true\n"
    )
    env_file.write_text(env_payload, encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.schema_path == Path("my-schemas")
    assert settings.eager_compile is True


def test_settings_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.schema_dir == "schemas"
    assert settings.eager_compile is False


def test_settings_rejects_unknown_log_level(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError, match="Unsupported log level"):
        Settings()


def test_get_settings_uses_environment(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("APP_ENV", "ci")

    settings = get_settings()
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_retries_after_env_template_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    attempts = {"count": 0}

    class _DummySettings:
        app_env = "ci"

    def _fake_settings():
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ValueError("missing")
        return _DummySettings()

    copied = {"done": 0}

    def _mark_env_copied(**kwargs: object) -> None:
        _ = kwargs
        copied["done"] += 1

    monkeypatch.setattr("rematch.settings.Settings", _fake_settings)
    monkeypatch.setattr("rematch.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("rematch.settings.ensure_env_file_exists", _mark_env_copied)

    settings = get_settings()
    assert copied["done"] == 1
    assert attempts["count"] == 2
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_wraps_env_copy_error_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _fake_settings():
        raise ValueError("missing")

    def _raise_io_error(**kwargs: object) -> None:
        _ = kwargs
        raise OSError("cannot write .env")

    monkeypatch.setattr("rematch.settings.Settings", _fake_settings)
    monkeypatch.setattr("rematch.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("rematch.settings.ensure_env_file_exists", _raise_io_error)

    with pytest.raises(SettingsError):
        get_settings()

    get_settings.cache_clear()


def test_get_settings_does_not_copy_env_on_non_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _raise_runtime_error():
        raise RuntimeError("boom")

    def _raise_assertion_error(**kwargs: object) -> None:
        _ = kwargs
        raise AssertionError("should not copy env")

    monkeypatch.setattr("rematch.settings.Settings", _raise_runtime_error)
    monkeypatch.setattr("rematch.settings._is_missing_settings_error", lambda exc: False)
    monkeypatch.setattr("rematch.settings.ensure_env_file_exists", _raise_assertion_error)

    with pytest.raises(SettingsError):
        get_settings()

    get_settings.cache_clear()


def test_ensure_env_file_exists_copies_template(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("SCHEMA_DIR=schemas\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.exists()
    assert "SCHEMA_DIR" in env_file.read_text(encoding="utf-8")


def test_ensure_env_file_exists_keeps_existing_file(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("SCHEMA_DIR=from-template\n", encoding="utf-8")
    env_file.write_text("SCHEMA_DIR=mine\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.read_text(encoding="utf-8") == "SCHEMA_DIR=mine\n"
