"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with ARCHITECT_ prefix
3. .env file (if ARCHITECT_ENV_FILE points at one, or ./.env exists)
4. Field defaults
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import architect.constants as constants

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Priority:
    1. ARCHITECT_ENV_FILE if set (explicit override, no fallback if missing)
    2. .env in the current directory
    3. None (rely on environment variables)
    """
    if env_file := _os.environ.get("ARCHITECT_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
        return None

    if _pathlib.Path(".env").exists():
        return ".env"

    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    Architect runtime settings.

    All settings can be overridden via environment variables with the
    ARCHITECT_ prefix, e.g. ARCHITECT_OUTPUT_FORMAT=json.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="ARCHITECT_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    output_dir: _pathlib.Path = _pydantic.Field(
        default=_pathlib.Path(constants.DEFAULT_OUTPUT_DIR),
        description="Directory build results are written to",
    )

    output_format: _typing.Literal["yaml", "json"] = _pydantic.Field(
        default=constants.DEFAULT_OUTPUT_FORMAT,  # type: ignore[assignment]
        description="Serialisation format for build results",
    )

    log_level: str = _pydantic.Field(
        default="WARNING",
        description="Root log level",
    )

    validate_requirements: bool = _pydantic.Field(
        default=True,
        description="Fail the build when a component requirement is not met",
    )

    validate_output: bool = _pydantic.Field(
        default=True,
        description="Fail the build when a component reports validation errors",
    )

    @_pydantic.field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: _typing.Any) -> str:
        level = str(value).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]
