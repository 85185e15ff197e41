"""Fixtures built on the stub Playwright objects in playwright_stubs."""

from typing import Any, Callable, List

import pytest
from loguru import logger

from e2e_suite.ui_testing.framework.execution_context import ExecutionContext
from e2e_suite.ui_testing.framework.lifecycle import ScenarioLifecycle
from e2e_suite.ui_testing.framework.settings import UISettings
from e2e_suite.unit.playwright_stubs import FakeBrowser, FakeContext, FakePage, FakePlaywright


# ================================================================================
# Fixtures
# ================================================================================

@pytest.fixture
def fake_playwright() -> FakePlaywright:
    return FakePlaywright()


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., UISettings]:
    def _make(**overrides: Any) -> UISettings:
        values = {
            "browser": "chrome",
            "base_url": "https://example.test",
            "base_url_is_fallback": False,
            "report_dir": tmp_path / "playwright-report",
            "logs_dir": tmp_path / "logs",
        }
        values.update(overrides)
        return UISettings(**values)
    return _make


@pytest.fixture
def make_lifecycle(make_settings, fake_playwright) -> Callable[..., ScenarioLifecycle]:
    def _make(**overrides: Any) -> ScenarioLifecycle:
        return ScenarioLifecycle(make_settings(**overrides), playwright_factory=lambda: fake_playwright)
    return _make


@pytest.fixture
def fake_page() -> FakePage:
    browser = FakeBrowser()
    return FakePage(FakeContext(browser, {}))


@pytest.fixture
def execution_context(fake_page) -> ExecutionContext:
    return ExecutionContext(
        browser=fake_page.context.browser,
        context=fake_page.context,
        page=fake_page,
        scenario_name="Successful login",
    )


@pytest.fixture
def log_messages() -> List[str]:
    """Messages logged through loguru while the test runs."""
    messages: List[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)
