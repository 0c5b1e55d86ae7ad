"""
Repository-level pytest configuration.

Why this exists:
  - Provide safe defaults so a fresh clone runs the unit suite offline
  - Install the Loguru sinks once per run
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from e2e_tools.common import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _demo_safe_env_defaults() -> Generator[None, None, None]:
    """
    Set demo-safe environment defaults if not already provided by the user/CI.
    """
    defaults = {
        "UI_BASE_URL": "https://github.com",
        "HEADLESS": "true",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    init_logger()
    yield
