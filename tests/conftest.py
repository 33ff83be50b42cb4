"""
Global pytest configuration and fixtures for DotMac API versioning tests.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from dotmac.versioning import (  # noqa: E402
    DEFAULT_READERS,
    VersionPolicy,
    VersionSignals,
    reset_settings,
)


@pytest.fixture(autouse=True)
def clean_versioning_env(monkeypatch):
    """Isolate tests from API_VERSIONING_* variables and the settings singleton."""
    for key in list(os.environ):
        if key.upper().startswith("API_VERSIONING_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def default_policy():
    """Versions 1 and 2, defaulting to 1 when the request names none."""
    return VersionPolicy(
        supported_versions={"1", "2"},
        default_version="1",
        assume_default_when_unspecified=True,
    )


@pytest.fixture
def strict_policy():
    """Versions 1 and 2 with no default; a version must always be given."""
    return VersionPolicy(supported_versions={"1", "2"})


@pytest.fixture
def deprecating_policy():
    """Version 1 deprecated in favour of 2."""
    return VersionPolicy(
        supported_versions={"1", "2"},
        default_version="2",
        assume_default_when_unspecified=True,
        deprecated_versions={"1"},
        readers=DEFAULT_READERS,
    )


@pytest.fixture
def no_signals():
    return VersionSignals()
