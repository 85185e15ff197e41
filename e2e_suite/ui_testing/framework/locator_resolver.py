"""
================================================================================
Locator Resolver
================================================================================

Logged access to Playwright's user-facing locator strategies.

Locator Priority Order (recommended):
    1. Role + accessible name
    2. Label text
    3. Placeholder / alt text / title
    4. Visible text content
    5. data-testid
    6. CSS selectors (`locate`, checked for at least one match)

Usage:
    >>> resolver = LocatorResolver(page)
    >>> username = resolver.by_label("Username")
    >>> submit = resolver.by_role("button", name="Submit")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Pattern, Union

from loguru import logger
from playwright.async_api import Locator, Page

from .errors import ActionFailed


TextMatcher = Union[str, Pattern[str]]


class LocatorResolver:
    """
    Resolves elements of one page through Playwright's `get_by_*` family.

    Resolution errors are logged and re-raised unchanged; `locate()` is the
    only method that touches the page and raises ActionFailed when the
    selector matches nothing.
    """

    def __init__(self, page: Page):
        self.page = page

    def _resolve(
        self,
        description: str,
        factory: Callable[..., Locator],
        *args: Any,
        **kwargs: Any,
    ) -> Locator:
        try:
            logger.info(f"Locating element by {description}")
            return factory(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error locating element by {description} - {e}")
            raise

    def by_role(self, role: str, **options: Any) -> Locator:
        """
        Locate by ARIA role.

        Args:
            role: ARIA role, e.g. "button", "textbox", "link"
            **options: `name`, `exact`, `checked`, ... as accepted by get_by_role
        """
        name = options.get("name")
        description = f"role: {role}" + (f" (name={name!r})" if name else "")
        return self._resolve(description, self.page.get_by_role, role, **options)

    def by_text(self, text: TextMatcher, exact: Optional[bool] = None) -> Locator:
        return self._resolve(f"text: {text}", self.page.get_by_text, text, exact=exact)

    def by_label(self, text: TextMatcher, exact: Optional[bool] = None) -> Locator:
        return self._resolve(f"label: {text}", self.page.get_by_label, text, exact=exact)

    def by_placeholder(self, text: TextMatcher, exact: Optional[bool] = None) -> Locator:
        return self._resolve(
            f"placeholder: {text}", self.page.get_by_placeholder, text, exact=exact
        )

    def by_alt_text(self, text: TextMatcher, exact: Optional[bool] = None) -> Locator:
        return self._resolve(f"alt text: {text}", self.page.get_by_alt_text, text, exact=exact)

    def by_title(self, text: TextMatcher, exact: Optional[bool] = None) -> Locator:
        return self._resolve(f"title: {text}", self.page.get_by_title, text, exact=exact)

    def by_test_id(self, test_id: TextMatcher) -> Locator:
        return self._resolve(f"test id: {test_id}", self.page.get_by_test_id, test_id)

    async def locate(self, selector: str) -> Locator:
        """
        Locate an element by selector and make sure it exists.

        Args:
            selector: CSS / Playwright selector

        Returns:
            Locator matching at least one element

        Raises:
            ActionFailed: When the selector is empty or matches nothing
        """
        action = f"locating element with selector: {selector!r}"
        logger.info(f"Attempting to find the element with selector: {selector}")

        if not selector or not isinstance(selector, str):
            error = ValueError("The provided selector is not a valid string")
            logger.error(f"Error locating element with selector: {selector}. Error: {error}")
            raise ActionFailed(action, error)

        try:
            locator = self.page.locator(selector)
            count = await locator.count()
        except Exception as e:
            logger.error(f"Error locating element with selector: {selector}. Error: {e}")
            raise ActionFailed(action, e) from e

        if count == 0:
            error = LookupError(f"Element with selector '{selector}' not found")
            logger.error(f"Error locating element with selector: {selector}. Error: {error}")
            raise ActionFailed(action, error)

        logger.info(f"Successfully found the element with selector: {selector}")
        return locator


__all__ = ["LocatorResolver"]
