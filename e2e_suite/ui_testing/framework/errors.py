"""
Exception types raised by the UI framework.

    - ConfigurationError: unsupported configuration (fatal, aborts the run)
    - ActionFailed: a UI action or assertion failed (propagates to the scenario)
    - LifecycleTeardownError: a teardown step failed (logged, never raised)
    - NotInitializedError: a browser handle was read before setup
"""

from __future__ import annotations

from typing import Optional

from e2e_tools.common import ConfigurationError


class ActionFailed(Exception):
    """Raised when a UI action or assertion fails."""

    def __init__(self, action: str, cause: Optional[BaseException] = None):
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to perform {action}")


class LifecycleTeardownError(Exception):
    """Wraps a failure of a scenario or browser teardown step."""

    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"Teardown step '{step}' failed: {cause}")


class NotInitializedError(RuntimeError):
    """Raised when a browser handle is read before the lifecycle created it."""
    pass


__all__ = [
    "ActionFailed",
    "ConfigurationError",
    "LifecycleTeardownError",
    "NotInitializedError",
]
