"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures and hooks driving the scenario lifecycle for the BDD browser suite.

Key Features:
- One event loop and one browser for the whole session
- Isolated browser context, trace and video per scenario
- Failure screenshot and per-scenario log file attached to Allure
- Stub login site served through request routing for `https://example.test`

================================================================================
"""

import asyncio
from pathlib import Path
from typing import Callable, Generator
from urllib.parse import urlparse

import pytest
from loguru import logger
from playwright.async_api import Route, async_playwright

from e2e_tools.common import install_exception_hooks, scenario_log_sink
from e2e_tools.report_tools.allure_utils import attach_file, attach_text
from e2e_suite.ui_testing.framework.errors import ConfigurationError
from e2e_suite.ui_testing.framework.execution_context import ExecutionContext
from e2e_suite.ui_testing.framework.lifecycle import ScenarioLifecycle, ScenarioRecord
from e2e_suite.ui_testing.framework.settings import UISettings, load_settings


RESOURCES_DIR = Path(__file__).parent.parent / "resources"
STUB_HOST = "example.test"


# ================================================================================
# Event Loop and Settings
# ================================================================================

@pytest.fixture(scope="session")
def run_async() -> Generator[Callable, None, None]:
    """
    Session-scoped runner for the async page and lifecycle API.

    BDD steps are synchronous; every coroutine they start runs on this
    single loop, which also owns the browser.
    """
    with asyncio.Runner() as runner:
        install_exception_hooks(runner.get_loop())
        yield runner.run


@pytest.fixture(scope="session")
def settings() -> UISettings:
    return load_settings()


# ================================================================================
# Lifecycle Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def playwright_factory() -> Callable:
    """Source of the Playwright driver used by the lifecycle."""
    return async_playwright


@pytest.fixture(scope="session")
def lifecycle(
    settings: UISettings,
    run_async,
    playwright_factory: Callable,
) -> Generator[ScenarioLifecycle, None, None]:
    """
    Session-scoped lifecycle: launches the configured browser once.

    An unsupported browser aborts the whole session before any scenario.
    """
    lifecycle = ScenarioLifecycle(settings, playwright_factory=playwright_factory)
    try:
        run_async(lifecycle.start())
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        pytest.exit(f"Invalid configuration: {e}", returncode=pytest.ExitCode.USAGE_ERROR)

    logger.info(
        f"Running against {settings.base_url} with {settings.browser} "
        f"(env={settings.env}, MAX_RETRIES={settings.max_retries}, retries not applied)"
    )
    yield lifecycle

    run_async(lifecycle.close())


@pytest.fixture
def scenario_name(request) -> str:
    """Scenario name from the feature file, or the test name outside BDD."""
    scenario = getattr(request.node.function, "__scenario__", None)
    return getattr(scenario, "name", None) or request.node.name


@pytest.fixture
def execution_context(
    request,
    lifecycle: ScenarioLifecycle,
    settings: UISettings,
    scenario_name: str,
    run_async,
) -> Generator[ExecutionContext, None, None]:
    """
    Per-scenario context, page, tracing and log file.

    At teardown the scenario outcome decides whether a screenshot is taken;
    trace and video are always kept.
    """
    paths = lifecycle.artifacts_for(scenario_name)

    try:
        with scenario_log_sink(paths.log_file):
            execution_context = run_async(lifecycle.begin_scenario(scenario_name))
            if urlparse(settings.base_url).hostname == STUB_HOST:
                run_async(_route_stub_site(execution_context))

            yield execution_context

            reports = (getattr(request.node, f"rep_{when}", None) for when in ("setup", "call"))
            failed = any(report is not None and report.failed for report in reports)
            record = run_async(lifecycle.end_scenario(ScenarioRecord(scenario_name, failed=failed)))
            if record.teardown_errors:
                attach_text(
                    "\n".join(str(error) for error in record.teardown_errors),
                    name="teardown-errors",
                )
    finally:
        attach_file(paths.log_file, name=f"{paths.scenario}.log")


# ================================================================================
# Stub Site
# ================================================================================

async def _route_stub_site(execution_context: ExecutionContext) -> None:
    """Serve the login and dashboard pages of the stub host from resources/."""

    async def _fulfill(route: Route) -> None:
        path = urlparse(route.request.url).path
        page_file = "dashboard.html" if path.startswith("/dashboard") else "login.html"
        await route.fulfill(
            status=200,
            content_type="text/html",
            body=(RESOURCES_DIR / page_file).read_text(encoding="utf-8"),
        )

    await execution_context.context.route(f"https://{STUB_HOST}/**", _fulfill)
    logger.debug(f"Stub site routed for https://{STUB_HOST}")


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase report as `item.rep_<phase>` for fixture teardown."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)
