# ================================================================================
# Element Actions Module
# ================================================================================
#
# This module wraps Playwright's element and page operations with a visibility
# precondition, logging, Allure steps and uniform error translation.
#
# Key Features:
#   - Visibility check before every element action
#   - Every failure logged and re-raised as ActionFailed(action, cause)
#   - Dropdown, checkbox, radio and file upload helpers
#   - Keyboard, mouse, dialog and tab handling
#   - Network mocking through page routes
#
# ================================================================================

from __future__ import annotations

import asyncio
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

import allure
from loguru import logger
from playwright.async_api import Dialog, Locator, Page, Route

from .errors import ActionFailed


class ElementActions:
    """
    Element and page interaction helpers for one Playwright page.

    Injected into page objects so they never call Playwright directly for
    actions. No action is retried: a failure is logged and raised as
    ActionFailed carrying the attempted action and the underlying cause.

    Example:
        actions = ElementActions(page)
        await actions.enter_text(page.get_by_label("Username"), "alice")
        await actions.click_element(page.get_by_role("button", name="Submit"))
    """

    def __init__(self, page: Page, default_timeout: Optional[float] = None):
        """
        Args:
            page: Playwright Page object
            default_timeout: Timeout for waits in milliseconds. None uses the
                page's default timeout.
        """
        self.page = page
        self.default_timeout = default_timeout

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    @contextmanager
    def action(description: str) -> Iterator[None]:
        """
        Translate any failure inside the block into ActionFailed.

        An ActionFailed raised by a nested action passes through unchanged.
        """
        try:
            yield
        except ActionFailed:
            raise
        except Exception as e:
            logger.error(f"Error occurred during {description}: {e}")
            raise ActionFailed(description, e) from e

    async def _ensure_visible(self, locator: Locator, action: str) -> None:
        with self.action(f"ensuring visibility before {action}"):
            logger.info(f"Checking visibility of element before {action}")
            await locator.wait_for(state="visible", timeout=self.default_timeout)

    # =========================================================================
    # Mouse Actions
    # =========================================================================

    async def click_element(self, locator: Locator, description: str = "") -> None:
        """Click an element once it is visible."""
        with allure.step(f"Click element: {description or locator}"), \
                self.action("clicking on element"):
            await self._ensure_visible(locator, "clicking")
            logger.info(f"Clicking on element: {description or locator}")
            await locator.click()

    async def double_click(self, locator: Locator) -> None:
        with self.action("double-clicking on element"):
            await self._ensure_visible(locator, "double-clicking")
            logger.info("Double-clicking on element.")
            await locator.dblclick()

    async def right_click(self, locator: Locator) -> None:
        with self.action("right-clicking on element"):
            await self._ensure_visible(locator, "right-clicking")
            logger.info("Right-clicking on element.")
            await locator.click(button="right")

    async def hover_element(self, locator: Locator) -> None:
        with self.action("hovering over element"):
            await self._ensure_visible(locator, "hovering")
            logger.info("Hovering over element.")
            await locator.hover()

    async def drag_and_drop(self, source: Locator, target: Locator) -> None:
        """Drag `source` and drop it onto `target`."""
        with self.action("performing drag and drop"):
            await self._ensure_visible(source, "dragging")
            await self._ensure_visible(target, "dropping")
            logger.info("Starting drag and drop action")
            await source.drag_to(target)
            logger.info("Drag and drop action completed")

    async def scroll_to(self, x: int, y: int) -> None:
        with self.action("scrolling the page"):
            logger.info(f"Scrolling the page to ({x}, {y})")
            await self.page.evaluate("([x, y]) => window.scrollTo(x, y)", [x, y])

    # =========================================================================
    # Input Actions
    # =========================================================================

    async def enter_text(
        self,
        locator: Locator,
        text: str,
        description: str = "",
        sensitive: bool = False,
    ) -> None:
        """
        Fill an input field, replacing its content.

        Args:
            locator: Input field
            text: Text to enter
            description: Human-readable description for reporting
            sensitive: Mask the value in logs and reports
        """
        shown = "*" * len(text) if sensitive else text
        with allure.step(f"Fill input: {description or locator}"), \
                self.action("filling input field"):
            await self._ensure_visible(locator, "filling input field")
            logger.info(f"Filling input field with text: {shown}")
            await locator.fill(text)

    async def type_text(self, locator: Locator, text: str, delay: float = 100) -> None:
        """Type text key by key, with `delay` ms between keystrokes."""
        with self.action("performing keyboard action"):
            await self._ensure_visible(locator, "typing")
            logger.info(f"Performing keyboard action with text: {text}")
            await locator.press_sequentially(text, delay=delay)

    async def press_key(self, key: str) -> None:
        with self.action("pressing key"):
            logger.info(f"Pressing the key: {key}")
            await self.page.keyboard.press(key)

    async def upload_file(
        self,
        locator: Locator,
        files: Union[str, Path, List[Union[str, Path]]],
    ) -> None:
        with self.action("uploading file"):
            logger.info(f"Uploading file(s): {files}")
            await locator.set_input_files(files)

    # =========================================================================
    # Dropdowns, Checkboxes and Radios
    # =========================================================================

    async def select_dropdown_by_text(self, locator: Locator, text: str) -> None:
        with self.action("selecting dropdown by text"):
            await self._ensure_visible(locator, "selecting dropdown option")
            logger.info(f"Selecting dropdown option by text: {text}")
            await locator.select_option(label=text)

    async def select_dropdown_by_value(self, locator: Locator, value: str) -> None:
        with self.action("selecting dropdown by value"):
            await self._ensure_visible(locator, "selecting dropdown option")
            logger.info(f"Selecting dropdown option by value: {value}")
            await locator.select_option(value=value)

    async def select_dropdown_by_index(self, locator: Locator, index: int) -> None:
        with self.action("selecting dropdown by index"):
            await self._ensure_visible(locator, "selecting dropdown option")
            logger.info(f"Selecting dropdown option by index: {index}")
            await locator.select_option(index=index)

    async def get_dropdown_values(self, locator: Locator) -> List[str]:
        """Return the text of every option of a select element."""
        with self.action("retrieving dropdown values"):
            options = await locator.locator("option").all_text_contents()
            logger.info(f"Dropdown values retrieved: {', '.join(options)}")
            return options

    async def check_checkbox(self, locator: Locator) -> None:
        with self.action("checking checkbox"):
            await self._ensure_visible(locator, "checking checkbox")
            if await locator.is_checked():
                logger.info("Checkbox already checked.")
                return
            await locator.check()

    async def uncheck_checkbox(self, locator: Locator) -> None:
        with self.action("unchecking checkbox"):
            await self._ensure_visible(locator, "unchecking checkbox")
            if not await locator.is_checked():
                logger.info("Checkbox already unchecked.")
                return
            await locator.uncheck()

    async def select_radio(self, locator: Locator) -> None:
        """Select a radio button unless it is already selected."""
        with self.action("selecting radio button"):
            await self._ensure_visible(locator, "selecting radio button")
            if not await locator.is_checked():
                await locator.check()

    # =========================================================================
    # Waits
    # =========================================================================

    async def wait_for_element_visible(
        self,
        locator: Locator,
        timeout: float = 30000,
    ) -> None:
        with self.action("waiting for element to be visible"):
            logger.info(f"Waiting for element to be visible: {locator}")
            await locator.wait_for(state="visible", timeout=timeout)

    async def wait_for_load_state(
        self,
        state: str = "load",
        timeout: Optional[float] = None,
    ) -> None:
        """
        Wait for the page to reach a load state.

        Args:
            state: 'load', 'domcontentloaded' or 'networkidle'
            timeout: Timeout in milliseconds
        """
        with self.action(f"waiting for page state '{state}'"):
            logger.info(f"Waiting for page state: {state}")
            await self.page.wait_for_load_state(state, timeout=timeout)

    # =========================================================================
    # Screenshots
    # =========================================================================

    async def take_page_screenshot(
        self,
        path: Union[str, Path],
        full_page: bool = True,
    ) -> bytes:
        with self.action("taking page screenshot"):
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            image = await self.page.screenshot(path=str(path), full_page=full_page)
            logger.info(f"Page screenshot saved at: {path}")
            return image

    async def take_element_screenshot(
        self,
        locator: Locator,
        path: Union[str, Path],
    ) -> bytes:
        with self.action("taking element screenshot"):
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            image = await locator.screenshot(path=str(path))
            logger.info(f"Element screenshot saved at: {path}")
            return image

    # =========================================================================
    # Dialogs and Tabs
    # =========================================================================

    async def accept_dialog(self) -> None:
        """Accept the next dialog (alert/confirm/prompt) the page opens."""
        async def _accept(dialog: Dialog) -> None:
            logger.info(f"Accepting dialog: {dialog.message}")
            await dialog.accept()

        with self.action("accepting alert"):
            self.page.once("dialog", _accept)

    async def dismiss_dialog(self) -> None:
        """Dismiss the next dialog the page opens."""
        async def _dismiss(dialog: Dialog) -> None:
            logger.info(f"Dismissing dialog: {dialog.message}")
            await dialog.dismiss()

        with self.action("dismissing alert"):
            self.page.once("dialog", _dismiss)

    async def switch_to_new_tab(self, trigger: Locator) -> Page:
        """Click `trigger` and return the page it opens in a new tab."""
        with self.action("handling window/tab"):
            async with self.page.context.expect_page() as page_info:
                await trigger.click()
            new_page = await page_info.value
            await new_page.wait_for_load_state()
            logger.info(f"Switched to new tab: {new_page.url}")
            return new_page

    # =========================================================================
    # Network Mocking
    # =========================================================================

    async def mock_api_response(
        self,
        url_pattern: str,
        body: str,
        status: int = 200,
        content_type: str = "application/json",
    ) -> None:
        """
        Answer every request matching `url_pattern` with a fixed response.

        Args:
            url_pattern: Glob or URL pattern accepted by `page.route`
            body: Response body
            status: HTTP status code
            content_type: Response content type
        """
        async def _fulfill(route: Route) -> None:
            await route.fulfill(status=status, body=body, content_type=content_type)

        with self.action("mocking API request"):
            logger.info(f"Mocking API for {url_pattern} with status code {status}")
            await self.page.route(url_pattern, _fulfill)

    async def mock_json_response(
        self,
        url_pattern: str,
        payload: Any,
        delay_ms: int = 0,
    ) -> None:
        """Answer matching requests with `payload` as JSON, optionally delayed."""
        async def _fulfill(route: Route) -> None:
            if delay_ms:
                await asyncio.sleep(delay_ms / 1000)
            await route.fulfill(
                status=200,
                content_type="application/json",
                body=json.dumps(payload),
            )

        description = "mocking network request with delay" if delay_ms else "mocking network request"
        with self.action(description):
            logger.info(f"Mocking request for URL: {url_pattern} (delay {delay_ms} ms)")
            await self.page.route(url_pattern, _fulfill)


__all__ = ["ElementActions"]
