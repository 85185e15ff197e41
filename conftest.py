"""
Repository-level pytest configuration.

Why this exists:
  - Provide safe defaults for local runs (no secrets embedded)
  - Initialize logging once, before any fixture runs
  - Register the BDD step definitions and the `--run-ui` switch

Important:
  Values below are placeholders. CI should export BASE_URL, BROWSER and ENV
  for the environment under test.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from e2e_tools.common import init_logger


pytest_plugins = ["pytester", "e2e_suite.ui_testing.steps.login_steps"]


def pytest_addoption(parser):
    parser.addoption(
        "--run-ui",
        action="store_true",
        default=False,
        help="Run the real-browser BDD scenarios (requires installed Playwright browsers)",
    )


def pytest_configure(config):
    """Set local defaults if not already provided by the user/CI, then set up logging."""
    defaults = {
        "ENV": "test",
        "BROWSER": "chrome",
    }
    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    init_logger()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
