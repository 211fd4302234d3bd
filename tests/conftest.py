"""
Shared pytest fixtures for Architect tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing

import pytest as _pytest

import architect
import architect.lazy as lazy

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "ARCHITECT_OUTPUT_DIR",
    "ARCHITECT_OUTPUT_FORMAT",
    "ARCHITECT_LOG_LEVEL",
    "ARCHITECT_VALIDATE_REQUIREMENTS",
    "ARCHITECT_VALIDATE_OUTPUT",
    "ARCHITECT_ENV_FILE",
    "NO_COLOR",
]


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """Return environment dict with Architect settings removed."""
    return {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}


@_pytest.fixture
def isolated_env(
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[None]:
    """
    Remove Architect settings from the environment for the test.

    Usage:
        def test_something(isolated_env):
            settings = config.Settings.construct_without_dotenv()
    """
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)
    yield


@_pytest.fixture
def store() -> lazy.LazyStore:
    """An empty store."""
    return lazy.LazyStore()


@_pytest.fixture
def root() -> lazy.Accessor:
    """Root accessor of a store seeded with an empty record."""
    return lazy.from_value({})


@_pytest.fixture
def target() -> architect.Target:
    """Empty target with no parameters."""
    return architect.Target()
