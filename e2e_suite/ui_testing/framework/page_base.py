"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Page handle captured from the scenario's ExecutionContext
    - Locator resolution and element actions
    - One generic `perform` helper shared by every business action

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

import allure
from loguru import logger

from .element_actions import ElementActions
from .errors import ActionFailed
from .execution_context import ExecutionContext
from .locator_resolver import LocatorResolver


T = TypeVar("T")


class BasePage:
    """
    Base class for all page objects.

    A page object is built for one scenario. It captures the page handle of
    the given ExecutionContext at construction and must not be reused once
    that scenario has ended.

    Usage:
        class LoginPage(BasePage):
            async def enter_username(self, username: str) -> None:
                await self.perform(
                    f"entering username: {username}",
                    lambda: self.actions.enter_text(
                        self.locators.by_label("Username"), username
                    ),
                )
    """

    def __init__(self, execution_context: ExecutionContext, base_url: str = ""):
        """
        Initialize page object.

        Args:
            execution_context: Context of the running scenario
            base_url: Base URL for the application

        Raises:
            NotInitializedError: When no scenario is running
        """
        self.execution_context = execution_context
        self.page = execution_context.page
        self.base_url = base_url.rstrip("/")
        self.actions = ElementActions(self.page)
        self.locators = LocatorResolver(self.page)

    async def perform(self, action: str, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run one business action with uniform logging and error translation.

        Args:
            action: Description of the attempted action, e.g. "clicking the login button"
            operation: Zero-argument callable returning the awaitable to run

        Returns:
            Whatever the operation returns

        Raises:
            ActionFailed: With `action` and the underlying cause, on any failure
        """
        with allure.step(action[:1].upper() + action[1:]):
            logger.info(f"Start {action}")
            try:
                result = await operation()
            except Exception as e:
                logger.error(f"Error occurred during {action}: {e}")
                raise ActionFailed(action, e) from e
            logger.info(f"Finished {action}")
            return result


__all__ = [
    "BasePage",
    "PageBase",
]

# Backward-compatible alias (many Page Objects prefer PageBase naming)
PageBase = BasePage
