"""
The login feature run end to end through pytest-bdd, with the suite's own
fixtures and hooks and the stub Playwright driver in place of a browser.
"""

from html.parser import HTMLParser
from pathlib import Path

import pytest

import e2e_suite
from e2e_suite.ui_testing.tests.conftest import _route_stub_site
from e2e_suite.unit.playwright_stubs import FakeRoute


FEATURE_FILE = Path(e2e_suite.__file__).parent / "ui_testing" / "features" / "login.feature"
SCENARIO = "Successful_login_with_valid_credentials"

SUITE_CONFTEST = """
from e2e_suite.ui_testing.tests.conftest import (
    execution_context,
    lifecycle,
    pytest_runtest_makereport,
    run_async,
    scenario_name,
    settings,
)
from e2e_suite.unit.playwright_stubs import FakePlaywright

import pytest

pytest_plugins = ["e2e_suite.ui_testing.steps.login_steps"]

HIDDEN_LABELS = {hidden_labels!r}


def _prepare_page(page):
    page.navigate_on_click["role=button[name=Submit]"] = "https://example.test/dashboard"
    for label in HIDDEN_LABELS:
        page.get_by_label(label).visible = False


@pytest.fixture(scope="session")
def playwright_factory():
    driver = FakePlaywright()
    for browser_type in (driver.chromium, driver.firefox, driver.webkit):
        browser_type.browser.on_new_page = _prepare_page
    return lambda: driver
"""

TEST_MODULE = """
from pytest_bdd import scenarios

scenarios("login.feature")
"""


@pytest.fixture
def login_suite(pytester, monkeypatch):
    """A throwaway project running the login feature against stub pages."""
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("BASE_URL", "https://example.test")
    monkeypatch.setenv("REPORT_DIR", str(pytester.path / "playwright-report"))
    monkeypatch.setenv("LOGGING_DIR", str(pytester.path / "logs"))
    pytester.makefile(".feature", login=FEATURE_FILE.read_text(encoding="utf-8"))
    pytester.makepyfile(test_login_wiring=TEST_MODULE)

    def _configure(browser="chrome", hidden_labels=()):
        monkeypatch.setenv("BROWSER", browser)
        pytester.makeconftest(SUITE_CONFTEST.format(hidden_labels=tuple(hidden_labels)))
        return pytester

    return _configure


def test_passing_scenario_keeps_trace_without_screenshot(login_suite):
    suite = login_suite()

    result = suite.inline_run()

    result.assertoutcome(passed=1)
    engine_root = suite.path / "playwright-report" / "chromium"
    assert not (engine_root / "screenshots" / f"{SCENARIO}.png").exists()
    assert (engine_root / "traces" / SCENARIO / f"{SCENARIO}-trace.zip").exists()
    log_text = (suite.path / "logs" / SCENARIO / "log.log").read_text(encoding="utf-8")
    assert "Start entering username: alice" in log_text


def test_failing_step_saves_failure_screenshot(login_suite):
    suite = login_suite(hidden_labels=["Username"])

    result = suite.inline_run()

    result.assertoutcome(failed=1)
    (report,) = result.getfailures()
    assert report.when == "call"
    assert "Failed to perform entering username: alice" in report.longreprtext
    screenshot = suite.path / "playwright-report" / "chromium" / "screenshots" / f"{SCENARIO}.png"
    assert screenshot.read_bytes().startswith(b"\x89PNG")


def test_unsupported_browser_stops_the_session_before_any_scenario(login_suite):
    suite = login_suite(browser="opera")

    result = suite.inline_run()

    assert result.ret == pytest.ExitCode.USAGE_ERROR
    assert result.getreports("pytest_runtest_logreport") == []
    assert not (suite.path / "playwright-report").exists()


# =============================================================================
# Stub site
# =============================================================================

class _FormCollector(HTMLParser):
    def __init__(self):
        super().__init__()
        self.forms = []

    def handle_starttag(self, tag, attrs):
        if tag == "form":
            self.forms.append(dict(attrs))


@pytest.mark.asyncio
async def test_stub_site_posts_credentials_to_dashboard(execution_context):
    await _route_stub_site(execution_context)
    pattern, handler = execution_context.context.routes[0]

    login = FakeRoute("https://example.test/")
    dashboard = FakeRoute("https://example.test/dashboard")
    await handler(login)
    await handler(dashboard)

    assert pattern == "https://example.test/**"
    collector = _FormCollector()
    collector.feed(login.fulfilled["body"])
    assert collector.forms == [{"id": "login-form", "action": "/dashboard", "method": "post"}]
    assert dashboard.fulfilled["content_type"] == "text/html"
    assert "login-form" not in dashboard.fulfilled["body"]
