"""
================================================================================
Assertion Wrapper
================================================================================

Logged wrappers around `playwright.async_api.expect`.

Every assertion logs its outcome. A failed expectation is logged and raised
as ActionFailed whose action reads "asserting ...", with the Playwright
assertion error as the cause.

Usage:
    await Assertions.to_be_visible(page.get_by_role("heading"))
    await Assertions.url_contains(page, "dashboard")

================================================================================
"""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Pattern, Union

from loguru import logger
from playwright.async_api import APIResponse, Locator, Page, Response, expect

from .errors import ActionFailed


Expected = Union[str, Pattern[str]]


class Assertions:
    """Expectation checks for locators, pages and responses."""

    @staticmethod
    @asynccontextmanager
    async def _asserting(description: str) -> AsyncIterator[None]:
        action = f"asserting {description}"
        try:
            yield
        except Exception as e:
            logger.error(f"Assertion failed: {description} - {e}")
            raise ActionFailed(action, e) from e
        logger.info(f"Assertion passed: {description}")

    # =========================================================================
    # Locator State
    # =========================================================================

    @classmethod
    async def to_be_attached(cls, locator: Locator) -> None:
        async with cls._asserting("locator is attached"):
            await expect(locator).to_be_attached()

    @classmethod
    async def to_be_visible(cls, locator: Locator) -> None:
        async with cls._asserting("locator is visible"):
            await expect(locator).to_be_visible()

    @classmethod
    async def to_be_hidden(cls, locator: Locator) -> None:
        async with cls._asserting("locator is hidden"):
            await expect(locator).to_be_hidden()

    @classmethod
    async def to_be_checked(cls, locator: Locator) -> None:
        async with cls._asserting("locator is checked"):
            await expect(locator).to_be_checked()

    @classmethod
    async def to_be_disabled(cls, locator: Locator) -> None:
        async with cls._asserting("locator is disabled"):
            await expect(locator).to_be_disabled()

    @classmethod
    async def to_be_enabled(cls, locator: Locator) -> None:
        async with cls._asserting("locator is enabled"):
            await expect(locator).to_be_enabled()

    @classmethod
    async def to_be_editable(cls, locator: Locator) -> None:
        async with cls._asserting("locator is editable"):
            await expect(locator).to_be_editable()

    @classmethod
    async def to_be_empty(cls, locator: Locator) -> None:
        async with cls._asserting("locator is empty"):
            await expect(locator).to_be_empty()

    @classmethod
    async def to_be_focused(cls, locator: Locator) -> None:
        async with cls._asserting("locator is focused"):
            await expect(locator).to_be_focused()

    @classmethod
    async def to_be_in_viewport(cls, locator: Locator) -> None:
        async with cls._asserting("locator is in viewport"):
            await expect(locator).to_be_in_viewport()

    # =========================================================================
    # Locator Content
    # =========================================================================

    @classmethod
    async def to_contain_text(cls, locator: Locator, text: Expected) -> None:
        async with cls._asserting(f"locator contains text '{text}'"):
            await expect(locator).to_contain_text(text)

    @classmethod
    async def to_have_text(cls, locator: Locator, text: Expected) -> None:
        async with cls._asserting(f"locator has text '{text}'"):
            await expect(locator).to_have_text(text)

    @classmethod
    async def to_have_attribute(cls, locator: Locator, name: str, value: Expected) -> None:
        async with cls._asserting(f"locator has attribute {name}='{value}'"):
            await expect(locator).to_have_attribute(name, value)

    @classmethod
    async def to_have_css(cls, locator: Locator, name: str, value: Expected) -> None:
        async with cls._asserting(f"locator has CSS {name}: {value}"):
            await expect(locator).to_have_css(name, value)

    # =========================================================================
    # Page and Response
    # =========================================================================

    @classmethod
    async def page_title(cls, page: Page, title: Expected) -> None:
        async with cls._asserting(f"page title is '{title}'"):
            await expect(page).to_have_title(title)

    @classmethod
    async def page_url(cls, page: Page, url: Expected) -> None:
        async with cls._asserting(f"page URL is '{url}'"):
            await expect(page).to_have_url(url)

    @classmethod
    async def url_contains(
        cls,
        page: Page,
        fragment: str,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Check the page URL contains `fragment`.

        Waits for a navigation started by the previous action to reach a
        matching URL. Without `timeout` the page's default timeout applies.
        """
        async with cls._asserting(f"page URL contains {fragment}"):
            await page.wait_for_url(re.compile(re.escape(fragment)), timeout=timeout)

    @classmethod
    async def response_ok(
        cls,
        response: Union[APIResponse, Response, None],
        description: Optional[str] = None,
    ) -> None:
        """Check an HTTP response has a 2xx status."""
        async with cls._asserting(f"response is OK{f' ({description})' if description else ''}"):
            if response is None:
                raise AssertionError("No response received")
            if isinstance(response, APIResponse):
                await expect(response).to_be_ok()
            elif not response.ok:
                raise AssertionError(f"Response status {response.status} for {response.url}")


__all__ = ["Assertions"]
