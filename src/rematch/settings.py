"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rematch.exceptions import SettingsError

logger = logging.getLogger(__name__)

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "rematch"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    schema_dir: str = Field(
        default="schemas",
        validation_alias="SCHEMA_DIR",
        description="Directory searched for `*.schema.json` files.",
    )
    eager_compile: bool = Field(
        default=False,
        validation_alias="EAGER_COMPILE",
        description="Compile every pattern when a parser is built instead of on first use.",
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        """Ensure the log level is a stdlib level name.

        Args:
            value (str): Raw log level.

        Raises:
            ValueError: If the level is unknown.

        Returns:
            str: Upper-cased level name.
        """
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            supported = ", ".join(sorted(_LOG_LEVELS))
            raise ValueError(f"Unsupported log level '{value}'. Expected one of: {supported}")
        return normalized

    @property
    def schema_path(self) -> Path:
        """Return the schema directory as a path."""
        return Path(self.schema_dir)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            try:
                ensure_env_file_exists()
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
