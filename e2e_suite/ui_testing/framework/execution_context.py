"""
Execution context passed from the scenario lifecycle to page objects and steps.

One instance is created per scenario. The lifecycle binds the browser,
context and page handles when the scenario starts and invalidates them when
it ends, so a consumer holding on to an old instance gets a
NotInitializedError instead of a closed page.
"""

from __future__ import annotations

from typing import Any, Optional

from playwright.async_api import Browser, BrowserContext, Page

from .errors import NotInitializedError


class ExecutionContext:
    """Holds the browser, context and page handles of the running scenario."""

    def __init__(
        self,
        browser: Optional[Browser] = None,
        context: Optional[BrowserContext] = None,
        page: Optional[Page] = None,
        scenario_name: str = "",
    ):
        self._browser = browser
        self._context = context
        self._page = page
        self.scenario_name = scenario_name

    def bind(
        self,
        *,
        browser: Optional[Browser] = None,
        context: Optional[BrowserContext] = None,
        page: Optional[Page] = None,
    ) -> "ExecutionContext":
        """Replace the given handles. Handles not passed are left as they are."""
        if browser is not None:
            self._browser = browser
        if context is not None:
            self._context = context
        if page is not None:
            self._page = page
        return self

    def invalidate(self) -> None:
        """Drop the scenario-scoped handles."""
        self._context = None
        self._page = None

    @property
    def is_active(self) -> bool:
        return self._context is not None and self._page is not None

    @property
    def browser(self) -> Browser:
        return self._require(self._browser, "browser")

    @property
    def context(self) -> BrowserContext:
        return self._require(self._context, "context")

    @property
    def page(self) -> Page:
        return self._require(self._page, "page")

    @staticmethod
    def _require(handle: Any, name: str) -> Any:
        if handle is None:
            raise NotInitializedError(
                f"The {name} is not initialized. "
                f"It is only available while a scenario is running."
            )
        return handle

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"ExecutionContext(scenario={self.scenario_name!r}, {state})"


__all__ = ["ExecutionContext"]
