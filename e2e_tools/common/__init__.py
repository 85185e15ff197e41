"""
================================================================================
E2E Tools Common Utilities
================================================================================

Shared configuration management and logging setup for the suite.

Exports:
    - ConfigLoader: Singleton configuration manager
    - get_config: Convenience function to get configuration values
    - init_logger: Initialize loguru with console and file sinks
    - install_exception_hooks: Log uncaught and event-loop errors
    - add_scenario_sink / scenario_log_sink: Per-scenario log file

Usage:
    from e2e_tools.common import get_config, init_logger

    init_logger()
    browser = get_config("browser", "chrome")

================================================================================
"""

from .global_config import (
    ConfigLoader,
    ConfigurationError,
    add_scenario_sink,
    get_config,
    init_logger,
    install_exception_hooks,
    reset_logger,
    scenario_log_sink,
)

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "add_scenario_sink",
    "get_config",
    "init_logger",
    "install_exception_hooks",
    "reset_logger",
    "scenario_log_sink",
]
