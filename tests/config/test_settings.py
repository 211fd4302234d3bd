"""Tests for configuration settings."""

import os as _os
import pathlib as _pathlib
import unittest.mock as _mock

import pydantic as _pydantic
import pytest as _pytest

import architect.config as config


class TestSettingsDefaults:
    """Test Settings default values when environment is clean."""

    def test_defaults(self, clean_env: dict[str, str]) -> None:
        """Defaults apply when nothing is configured."""
        with _mock.patch.dict(_os.environ, clean_env, clear=True):
            settings = config.Settings.construct_without_dotenv()

        assert settings.output_dir == _pathlib.Path("out")
        assert settings.output_format == "yaml"
        assert settings.log_level == "WARNING"
        assert settings.validate_requirements is True
        assert settings.validate_output is True


class TestSettingsEnvironment:
    """ARCHITECT_ environment variables override defaults."""

    def test_env_overrides(self, isolated_env: None, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARCHITECT_OUTPUT_DIR", "/tmp/manifests")
        monkeypatch.setenv("ARCHITECT_OUTPUT_FORMAT", "json")
        monkeypatch.setenv("ARCHITECT_VALIDATE_REQUIREMENTS", "false")
        monkeypatch.setenv("ARCHITECT_VALIDATE_OUTPUT", "0")

        settings = config.Settings.construct_without_dotenv()

        assert settings.output_dir == _pathlib.Path("/tmp/manifests")
        assert settings.output_format == "json"
        assert settings.validate_requirements is False
        assert settings.validate_output is False

    def test_constructor_beats_env(
        self, isolated_env: None, monkeypatch: _pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ARCHITECT_OUTPUT_FORMAT", "json")

        settings = config.Settings.construct_without_dotenv(output_format="yaml")

        assert settings.output_format == "yaml"

    def test_unrelated_env_ignored(
        self, isolated_env: None, monkeypatch: _pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ARCHITECT_UNKNOWN_OPTION", "1")

        settings = config.Settings.construct_without_dotenv()

        assert not hasattr(settings, "unknown_option")


class TestSettingsValidation:
    """Invalid values are rejected by pydantic."""

    def test_invalid_output_format(self, isolated_env: None) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings.construct_without_dotenv(output_format="toml")

    def test_log_level_normalized(self, isolated_env: None) -> None:
        assert config.Settings.construct_without_dotenv(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self, isolated_env: None) -> None:
        with _pytest.raises(_pydantic.ValidationError) as exc_info:
            config.Settings.construct_without_dotenv(log_level="chatty")

        assert "log_level must be one of" in str(exc_info.value)


class TestEnvFile:
    """The .env file location can be overridden."""

    def test_env_file_override(
        self,
        tmp_path: _pathlib.Path,
        isolated_env: None,
        monkeypatch: _pytest.MonkeyPatch,
    ) -> None:
        env_file = tmp_path / "custom.env"
        env_file.write_text("ARCHITECT_OUTPUT_FORMAT=json\n")
        monkeypatch.setenv("ARCHITECT_ENV_FILE", str(env_file))

        settings = config.Settings(_env_file=config.settings._get_env_file())  # type: ignore[call-arg]

        assert settings.output_format == "json"

    def test_missing_env_file_override(
        self,
        tmp_path: _pathlib.Path,
        isolated_env: None,
        monkeypatch: _pytest.MonkeyPatch,
    ) -> None:
        """A missing override disables .env loading instead of falling back."""
        monkeypatch.setenv("ARCHITECT_ENV_FILE", str(tmp_path / "absent.env"))

        assert config.settings._get_env_file() is None
