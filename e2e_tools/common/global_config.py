"""
================================================================================
Global Configuration for the E2E Suite
================================================================================

This module provides centralized configuration management and logging setup
for the browser suite and its tooling.

Features:
    - Singleton configuration loader
    - YAML base file merged with a profile file selected by ENV
    - Environment variable overrides (BASE_URL overrides base_url)
    - Centralized Loguru logging configuration (console + log files)
    - Uncaught exception / unhandled event-loop error capture

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

import yaml
from loguru import logger


# Default configuration directory (repository root /config)
DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"
DEFAULT_PROFILE = "test"
DEFAULT_LOGS_DIR = "test-results/logs"

DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} [{level}]: {message}"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or names an unsupported value."""
    pass


# ============================================================
# Configuration Management
# ============================================================

class ConfigLoader:
    """
    Configuration loader with YAML profile and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (BASE_URL, BROWSER, ...)
        2. Profile file config/<ENV>.yaml
        3. Base file config/config.yaml
        4. Default values passed to get()

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("browser", "chrome")
        'firefox'  # From env var BROWSER

    Environment Variable Mapping:
        - base_url -> BASE_URL
        - browser_close_timeout -> BROWSER_CLOSE_TIMEOUT
        - logging.level -> LOGGING_LEVEL
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(
        cls,
        config_dir: Optional[Path] = None,
        profile: Optional[str] = None,
    ) -> "ConfigLoader":
        """Singleton pattern - configuration is loaded once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        profile: Optional[str] = None,
    ) -> None:
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory holding config.yaml and profile files.
                        Uses DEFAULT_CONFIG_DIR if not specified.
            profile: Profile name. Defaults to the ENV environment variable.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._profile = profile or os.getenv("ENV") or DEFAULT_PROFILE
        self._load_config()
        self._initialized = True

    @property
    def profile(self) -> str:
        """Active environment profile name."""
        return self._profile

    def _load_config(self) -> None:
        """Load base configuration and merge the profile file over it."""
        base_path = self._config_dir / "config.yaml"
        if base_path.exists():
            self._config = self._read_yaml(base_path)
            logger.debug(f"Loaded configuration from: {base_path}")
        else:
            logger.warning(
                f"Configuration file not found: {base_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}

        profile_path = self._config_dir / f"{self._profile}.yaml"
        if profile_path.exists():
            self._config = _deep_merge(self._config, self._read_yaml(profile_path))
            logger.debug(f"Merged profile configuration: {profile_path}")
        else:
            logger.info(f"No settings file for profile '{self._profile}'")

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file {path}: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "base_url", "logging.level")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None and env_value != "":
            return self._convert_type(env_value, default)

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def reload(self) -> None:
        """Reload configuration from files."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_dir}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None
        cls._config = {}


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get a configuration value.

    Example:
        timeout = get_config("browser_close_timeout", 15000)
    """
    return ConfigLoader().get(key, default)


# ============================================================
# Logging Setup
# ============================================================

_logger_initialized: bool = False


def _kind_filter(kind: str) -> Callable[[Dict[str, Any]], bool]:
    def _filter(record: Dict[str, Any]) -> bool:
        return record["extra"].get("kind") == kind
    return _filter


def init_logger(
    level: Optional[str] = None,
    logs_dir: Optional[str] = None,
    format_str: Optional[str] = None,
) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Sinks:
        - stderr (colorized)
        - <logs_dir>/app.log        every record at the configured level
        - <logs_dir>/error.log      ERROR and above
        - <logs_dir>/exceptions.log uncaught exceptions
        - <logs_dir>/rejections.log unhandled event-loop errors

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        logs_dir: Directory for log files. Defaults to config value.
        format_str: Custom console format string.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    log_level = (level or get_config("logging.level", "INFO")).upper()
    log_format = format_str or get_config("logging.format", DEFAULT_LOG_FORMAT)
    log_dir = Path(logs_dir or get_config("logging.dir", DEFAULT_LOGS_DIR))
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    file_options = {
        "format": FILE_LOG_FORMAT,
        "rotation": get_config("logging.rotation", "10 MB"),
        "retention": get_config("logging.retention", "7 days"),
        "encoding": "utf-8",
    }
    logger.add(str(log_dir / "app.log"), level=log_level, **file_options)
    logger.add(str(log_dir / "error.log"), level="ERROR", **file_options)
    logger.add(
        str(log_dir / "exceptions.log"),
        level="ERROR",
        filter=_kind_filter("uncaught"),
        **file_options,
    )
    logger.add(
        str(log_dir / "rejections.log"),
        level="ERROR",
        filter=_kind_filter("unhandled_rejection"),
        **file_options,
    )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level} (logs: {log_dir})")


def install_exception_hooks(loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
    """
    Route uncaught exceptions and unhandled event-loop errors to the log files.

    Args:
        loop: Event loop whose exception handler should be replaced.
    """

    def _log_uncaught(exc_type, exc_value, exc_tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logger.bind(kind="uncaught").opt(
            exception=(exc_type, exc_value, exc_tb)
        ).critical("Uncaught exception")

    sys.excepthook = _log_uncaught

    if loop is None:
        return

    def _log_unhandled(_loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        message = context.get("message", "Unhandled error in event loop")
        exc = context.get("exception")
        bound = logger.bind(kind="unhandled_rejection")
        if exc is not None:
            bound.opt(exception=exc).error(message)
        else:
            bound.error(message)

    loop.set_exception_handler(_log_unhandled)


def add_scenario_sink(log_file: Path, level: str = "INFO") -> int:
    """
    Add a file sink collecting the logs of a single scenario.

    Returns:
        The sink id, to be passed to `logger.remove()` at scenario end.
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return logger.add(
        str(log_file),
        level=level,
        format=FILE_LOG_FORMAT,
        encoding="utf-8",
    )


@contextmanager
def scenario_log_sink(log_file: Path, level: str = "INFO") -> Iterator[int]:
    """
    Collect the logs of a single scenario for the duration of the block.

    The sink is removed on exit, also when the block raises.
    """
    sink_id = add_scenario_sink(log_file, level)
    try:
        yield sink_id
    finally:
        logger.remove(sink_id)


def reset_logger() -> None:
    """Drop all sinks so the next init_logger() call reconfigures them."""
    global _logger_initialized
    logger.remove()
    _logger_initialized = False


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "get_config",
    "init_logger",
    "install_exception_hooks",
    "add_scenario_sink",
    "reset_logger",
    "scenario_log_sink",
]
