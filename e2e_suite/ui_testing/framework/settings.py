"""
================================================================================
UI Run Settings
================================================================================

Typed view over the suite configuration.

Values come from `config/config.yaml`, the profile file selected by ENV, and
environment variables (highest priority):

    BROWSER                 chrome | firefox | webkit | edge   (default: chrome)
    ENV                     profile name                       (default: test)
    BASE_URL                application URL                    (default: fallback URL)
    MAX_RETRIES             read and reported, never applied   (default: 2)
    BROWSER_CLOSE_TIMEOUT   browser close ceiling in ms        (default: 15000)

Headless mode is always on.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from e2e_tools.common import ConfigLoader, ConfigurationError


DEFAULT_BROWSER = "chrome"
FALLBACK_BASE_URL = "https://default-url.com"
DEFAULT_MAX_RETRIES = 2
DEFAULT_BROWSER_CLOSE_TIMEOUT_MS = 15000
ACTION_TIMEOUT_MS = 60 * 1000
DEFAULT_REPORT_DIR = "playwright-report"
DEFAULT_LOGS_DIR = "test-results/logs"


@dataclass(frozen=True)
class UISettings:
    """
    Settings for one run of the browser suite.

    Attributes:
        browser: Configured browser engine name
        env: Active environment profile
        base_url: Application base URL
        base_url_is_fallback: True when no base URL was configured
        headless: Always True
        max_retries: Configured retry count (not applied to scenarios)
        browser_close_timeout_ms: Ceiling for the final browser close
        action_timeout_ms: Per-action and navigation ceiling
        report_dir: Artifact root directory
        logs_dir: Log file directory
    """
    browser: str = DEFAULT_BROWSER
    env: str = "test"
    base_url: str = FALLBACK_BASE_URL
    base_url_is_fallback: bool = True
    headless: bool = True
    max_retries: int = DEFAULT_MAX_RETRIES
    browser_close_timeout_ms: int = DEFAULT_BROWSER_CLOSE_TIMEOUT_MS
    action_timeout_ms: int = ACTION_TIMEOUT_MS
    report_dir: Path = Path(DEFAULT_REPORT_DIR)
    logs_dir: Path = Path(DEFAULT_LOGS_DIR)


def _as_int(value, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def load_settings(config: Optional[ConfigLoader] = None) -> UISettings:
    """
    Build UISettings from the configuration loader.

    Args:
        config: Loader to read from (defaults to the process-wide loader)

    Returns:
        The resolved settings
    """
    config = config or ConfigLoader()

    base_url = config.get("base_url")
    if not base_url:
        logger.warning("BASE_URL is not configured. Using fallback URL.")

    settings = UISettings(
        browser=str(config.get("browser", DEFAULT_BROWSER)).strip() or DEFAULT_BROWSER,
        env=config.profile,
        base_url=base_url or FALLBACK_BASE_URL,
        base_url_is_fallback=not base_url,
        headless=True,
        max_retries=_as_int(config.get("max_retries", DEFAULT_MAX_RETRIES), "MAX_RETRIES"),
        browser_close_timeout_ms=_as_int(
            config.get("browser_close_timeout", DEFAULT_BROWSER_CLOSE_TIMEOUT_MS),
            "BROWSER_CLOSE_TIMEOUT",
        ),
        report_dir=Path(config.get("report_dir", DEFAULT_REPORT_DIR)),
        logs_dir=Path(config.get("logging.dir", DEFAULT_LOGS_DIR)),
    )
    logger.debug(f"Resolved UI settings: {settings}")
    return settings


__all__ = [
    "UISettings",
    "load_settings",
    "ACTION_TIMEOUT_MS",
    "FALLBACK_BASE_URL",
]
