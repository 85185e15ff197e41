"""
================================================================================
Scenario Lifecycle
================================================================================

Browser lifecycle management for the BDD suite.

One browser is launched per run; every scenario gets its own isolated
browser context and page, with video recording and tracing. At scenario end
a screenshot is captured when the scenario failed, the trace is saved, and
page and context are closed. Teardown failures are logged and collected on
the scenario record, never raised. The final browser close is bounded by
`browser_close_timeout_ms`.

States:
    UNINITIALIZED -> BROWSER_READY -> SCENARIO_ACTIVE -> BROWSER_READY ... -> CLOSED

Usage:
    async with ScenarioLifecycle(load_settings()) as lifecycle:
        execution_context = await lifecycle.begin_scenario("Successful login")
        ...
        await lifecycle.end_scenario(ScenarioRecord("Successful login", failed=False))

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from loguru import logger
from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from e2e_tools.report_tools.allure_utils import attach_file, attach_png

from .artifacts import ArtifactPaths
from .bounded import run_bounded
from .errors import ConfigurationError, LifecycleTeardownError
from .execution_context import ExecutionContext
from .settings import UISettings


# Configured browser name -> (Playwright engine, launch channel)
BROWSER_ENGINES: Dict[str, Tuple[str, Optional[str]]] = {
    "chrome": ("chromium", None),
    "chromium": ("chromium", None),
    "firefox": ("firefox", None),
    "webkit": ("webkit", None),
    "safari": ("webkit", None),
    "edge": ("chromium", "msedge"),
}

DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
    "viewport": {"width": 1920, "height": 1080},
    "ignore_https_errors": True,
}


def resolve_engine(browser: str) -> Tuple[str, Optional[str]]:
    """
    Map a configured browser name to a Playwright engine and channel.

    Raises:
        ConfigurationError: For names outside BROWSER_ENGINES
    """
    key = (browser or "").strip().lower()
    if key not in BROWSER_ENGINES:
        supported = ", ".join(sorted(BROWSER_ENGINES))
        raise ConfigurationError(
            f"Unsupported browser: '{browser}'. Supported browsers: {supported}"
        )
    return BROWSER_ENGINES[key]


class LifecycleState(Enum):
    UNINITIALIZED = "uninitialized"
    BROWSER_READY = "browser_ready"
    SCENARIO_ACTIVE = "scenario_active"
    CLOSED = "closed"


@dataclass
class ScenarioRecord:
    """
    Outcome of one scenario and the artifacts its teardown produced.

    Attributes:
        name: Scenario name as written in the feature file
        failed: Whether the scenario failed
        screenshot: Failure screenshot bytes (failed scenarios only)
        screenshot_path: Where the failure screenshot was saved
        trace_path: Where the trace archive was saved
        video_path: Where the video recording was saved
        teardown_errors: Teardown steps that failed
    """
    name: str
    failed: bool = False
    screenshot: Optional[bytes] = None
    screenshot_path: Optional[Path] = None
    trace_path: Optional[Path] = None
    video_path: Optional[Path] = None
    teardown_errors: List[LifecycleTeardownError] = field(default_factory=list)


class ScenarioLifecycle:
    """
    Owns the Playwright driver, the browser and the active scenario's context.

    Args:
        settings: Run settings (browser, timeouts, report directory)
        playwright_factory: Callable returning an object whose async `start()`
            yields a Playwright instance. Defaults to `async_playwright`.
    """

    def __init__(
        self,
        settings: UISettings,
        playwright_factory: Callable[[], Any] = async_playwright,
    ):
        self.settings = settings
        self._playwright_factory = playwright_factory

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._state = LifecycleState.UNINITIALIZED
        self._engine: Optional[str] = None
        self._current: Optional[ExecutionContext] = None
        self._current_paths: Optional[ArtifactPaths] = None
        self._browser_closed: bool = False
        self.scenarios_run: int = 0

    async def __aenter__(self) -> "ScenarioLifecycle":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def engine(self) -> str:
        if self._engine is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._engine

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    @property
    def current(self) -> Optional[ExecutionContext]:
        """ExecutionContext of the active scenario, if any."""
        return self._current

    def _expect_state(self, expected: LifecycleState, operation: str) -> None:
        if self._state is not expected:
            raise RuntimeError(
                f"Cannot {operation} in state '{self._state.value}' "
                f"(expected '{expected.value}')"
            )

    def artifacts_for(self, scenario_name: str) -> ArtifactPaths:
        return ArtifactPaths.for_scenario(
            self.settings.report_dir,
            self.engine,
            scenario_name,
            logs_dir=self.settings.logs_dir,
        )

    # =========================================================================
    # Run Lifetime
    # =========================================================================

    async def start(self) -> None:
        """
        Start Playwright and launch the configured browser headless.

        Raises:
            ConfigurationError: When the configured browser is not supported.
                Raised before Playwright is started.
        """
        self._expect_state(LifecycleState.UNINITIALIZED, "start the browser")
        engine, channel = resolve_engine(self.settings.browser)

        self.settings.report_dir.mkdir(parents=True, exist_ok=True)

        self._playwright = await self._playwright_factory().start()
        launch_options: Dict[str, Any] = {"headless": True}
        if channel:
            launch_options["channel"] = channel

        browser_launcher = getattr(self._playwright, engine)
        try:
            self._browser = await browser_launcher.launch(**launch_options)
        except Exception:
            await run_bounded(
                self._playwright.stop(),
                self.settings.browser_close_timeout_ms,
                "Playwright shutdown",
            )
            self._playwright = None
            raise

        self._engine = engine
        self._state = LifecycleState.BROWSER_READY
        logger.info(
            f"Browser started: {self.settings.browser} "
            f"(engine={engine}, channel={channel}, headless=True)"
        )

    async def close(self) -> bool:
        """
        Close the browser within `browser_close_timeout_ms`, then stop Playwright.

        Never raises. A scenario still active is ended first.

        Returns:
            True when the browser confirmed closure in time
        """
        if self._state is LifecycleState.CLOSED:
            return self._browser_closed

        if self._state is LifecycleState.SCENARIO_ACTIVE and self._current is not None:
            logger.warning(
                f"Scenario '{self._current.scenario_name}' still active at shutdown, ending it"
            )
            await self.end_scenario(ScenarioRecord(self._current.scenario_name))

        timeout_ms = self.settings.browser_close_timeout_ms
        self._browser_closed = self._browser is None
        if self._browser is not None:
            self._browser_closed = await run_bounded(
                self._browser.close(), timeout_ms, "Browser closure"
            )
            if self._browser_closed:
                logger.info("Browser closed successfully.")
            self._browser = None

        if self._playwright is not None:
            await run_bounded(self._playwright.stop(), timeout_ms, "Playwright shutdown")
            self._playwright = None

        self._state = LifecycleState.CLOSED
        logger.debug(f"Lifecycle closed after {self.scenarios_run} scenario(s)")
        return self._browser_closed

    # =========================================================================
    # Scenario Lifetime
    # =========================================================================

    async def begin_scenario(self, name: str) -> ExecutionContext:
        """
        Create an isolated context and page for one scenario and start tracing.

        Args:
            name: Scenario name (sanitized for artifact paths)

        Returns:
            ExecutionContext bound to the browser, the new context and page
        """
        self._expect_state(LifecycleState.BROWSER_READY, "begin a scenario")
        paths = self.artifacts_for(name)
        timeout_ms = self.settings.action_timeout_ms

        context: BrowserContext = await self._browser.new_context(
            record_video_dir=str(paths.video_dir),
            **DEFAULT_CONTEXT_OPTIONS,
        )
        try:
            context.set_default_timeout(timeout_ms)
            context.set_default_navigation_timeout(timeout_ms)
            page = await context.new_page()
            page.set_default_timeout(timeout_ms)
            await context.tracing.start(screenshots=True, snapshots=True)
        except Exception:
            await run_bounded(context.close(), timeout_ms, "Closing half-created context")
            raise

        execution_context = ExecutionContext(scenario_name=name).bind(
            browser=self._browser,
            context=context,
            page=page,
        )
        self._current = execution_context
        self._current_paths = paths
        self._state = LifecycleState.SCENARIO_ACTIVE
        self.scenarios_run += 1
        logger.info(f"Scenario started: {name}")
        return execution_context

    async def end_scenario(self, record: ScenarioRecord) -> ScenarioRecord:
        """
        Capture artifacts for the active scenario and release its context.

        Order: failure screenshot, trace, video path, page close, context
        close. Page and context are closed even when capture fails.

        Returns:
            The record, with artifact paths and teardown errors filled in
        """
        self._expect_state(LifecycleState.SCENARIO_ACTIVE, "end a scenario")
        execution_context = self._current
        paths = self._current_paths
        page = execution_context.page
        context = execution_context.context

        try:
            if record.failed:
                await self._contained(
                    record, "capturing failure screenshot",
                    lambda: self._capture_screenshot(page, paths, record),
                )
            await self._contained(
                record, "stopping trace",
                lambda: self._save_trace(context, paths, record),
            )
            await self._contained(
                record, "resolving video path",
                lambda: self._resolve_video(page, record),
            )
        finally:
            await self._contained(record, "closing page", page.close)
            await self._contained(record, "closing context", context.close)
            execution_context.invalidate()
            self._current = None
            self._current_paths = None
            self._state = LifecycleState.BROWSER_READY

        # The recording is flushed once the context is closed
        if record.video_path is not None:
            attach_file(record.video_path, name=f"{paths.scenario}-video.webm")

        logger.info(
            f"Scenario finished: {record.name} "
            f"({'failed' if record.failed else 'passed'}, "
            f"{len(record.teardown_errors)} teardown error(s))"
        )
        return record

    @staticmethod
    async def _contained(
        record: ScenarioRecord,
        step: str,
        operation: Callable[[], Awaitable[Any]],
    ) -> None:
        try:
            await operation()
        except Exception as e:
            error = LifecycleTeardownError(step, e)
            logger.error(f"Error while {step} for scenario '{record.name}': {e}")
            record.teardown_errors.append(error)

    @staticmethod
    async def _capture_screenshot(page, paths: ArtifactPaths, record: ScenarioRecord) -> None:
        paths.screenshot.parent.mkdir(parents=True, exist_ok=True)
        record.screenshot = await page.screenshot(path=str(paths.screenshot), full_page=True)
        record.screenshot_path = paths.screenshot
        attach_png(record.screenshot, name=f"{paths.scenario}-failure")
        logger.info(f"Failure screenshot saved at: {paths.screenshot}")

    @staticmethod
    async def _save_trace(context, paths: ArtifactPaths, record: ScenarioRecord) -> None:
        paths.trace.parent.mkdir(parents=True, exist_ok=True)
        await context.tracing.stop(path=str(paths.trace))
        record.trace_path = paths.trace
        attach_file(paths.trace, name=paths.trace.name)
        logger.info(f"Trace saved at: {paths.trace}")

    @staticmethod
    async def _resolve_video(page, record: ScenarioRecord) -> None:
        video = page.video
        if video is None:
            return
        record.video_path = Path(await video.path())


__all__ = [
    "BROWSER_ENGINES",
    "LifecycleState",
    "ScenarioLifecycle",
    "ScenarioRecord",
    "resolve_engine",
]
