"""
Repository-level pytest configuration.

Provides predictable defaults for the harness configuration so unit runs do
not depend on the developer's shell. Values already set by the user or CI
win over these.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from acceptance.framework.config_loader import ConfigLoader


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _local_env_defaults() -> Generator[None, None, None]:
    """Point the harness at a local store and keep browsers headless."""
    defaults = {
        "UI_BASE_URL": "http://localhost:8080",
        "BROWSER_HEADLESS": "true",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield


@pytest.fixture(autouse=True)
def _fresh_config() -> Generator[None, None, None]:
    """Tests never share a ConfigLoader singleton."""
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
