"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

Business actions of the login screen:
  - navigate to the application's login page (the configured base URL)
  - enter username / password (located by their labels)
  - submit the form (button named "Submit")

Each action runs through `BasePage.perform`, so any failure surfaces as
ActionFailed naming the action that was attempted.

================================================================================
"""

from __future__ import annotations

from loguru import logger

from e2e_suite.ui_testing.framework.execution_context import ExecutionContext
from e2e_suite.ui_testing.framework.page_base import PageBase
from e2e_suite.ui_testing.framework.settings import FALLBACK_BASE_URL


class LoginPage(PageBase):
    """Login page object (async)."""

    USERNAME_LABEL = "Username"
    PASSWORD_LABEL = "Password"
    SUBMIT_BUTTON_NAME = "Submit"

    def __init__(self, execution_context: ExecutionContext, base_url: str = ""):
        if not base_url:
            logger.warning("Base URL is not set. Using fallback URL.")
            base_url = FALLBACK_BASE_URL
        super().__init__(execution_context, base_url)

    async def navigate_to_login_page(self) -> None:
        """Open the base URL and wait for the load event."""
        async def _goto() -> None:
            logger.info(f"Using base URL: {self.base_url}")
            await self.page.goto(self.base_url, wait_until="load")

        await self.perform("navigating to the login page", _goto)

    async def enter_username(self, username: str) -> None:
        await self.perform(
            f"entering username: {username}",
            lambda: self.actions.enter_text(
                self.locators.by_label(self.USERNAME_LABEL),
                username,
                description="Username",
            ),
        )

    async def enter_password(self, password: str) -> None:
        # The value never reaches the logs or the report
        await self.perform(
            "entering password",
            lambda: self.actions.enter_text(
                self.locators.by_label(self.PASSWORD_LABEL),
                password,
                description="Password",
                sensitive=True,
            ),
        )

    async def click_login_button(self) -> None:
        await self.perform(
            "clicking the login button",
            lambda: self.actions.click_element(
                self.locators.by_role("button", name=self.SUBMIT_BUTTON_NAME),
                description="Submit button",
            ),
        )

    async def login(self, username: str, password: str) -> None:
        """Fill both credentials and submit."""
        await self.enter_username(username)
        await self.enter_password(password)
        await self.click_login_button()


__all__ = ["LoginPage"]
