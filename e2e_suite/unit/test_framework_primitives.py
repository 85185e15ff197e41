import asyncio
from pathlib import Path

import pytest

from e2e_suite.ui_testing.framework.artifacts import ArtifactPaths, sanitize_scenario_name
from e2e_suite.ui_testing.framework.bounded import run_bounded
from e2e_suite.ui_testing.framework.errors import ActionFailed, NotInitializedError
from e2e_suite.ui_testing.framework.execution_context import ExecutionContext


# =============================================================================
# Scenario names and artifact paths
# =============================================================================

@pytest.mark.parametrize(
    "name, expected",
    [
        ("Successful login", "Successful_login"),
        ("Login   with\tmany    spaces", "Login_with_many_spaces"),
        ("  Mixed Case Name  ", "_Mixed_Case_Name_"),
        ("Trailing newline\n", "Trailing_newline_"),
        ("single", "single"),
    ],
)
def test_sanitize_scenario_name(name, expected):
    assert sanitize_scenario_name(name) == expected


def test_artifact_layout():
    paths = ArtifactPaths.for_scenario("playwright-report", "webkit", "Login fails", logs_dir="logs")

    assert paths.scenario == "Login_fails"
    assert paths.screenshot == Path("playwright-report/webkit/screenshots/Login_fails.png")
    assert paths.trace == Path("playwright-report/webkit/traces/Login_fails/Login_fails-trace.zip")
    assert paths.video_dir == Path("playwright-report/webkit/videos/Login_fails")
    assert paths.log_file == Path("logs/Login_fails/log.log")


# =============================================================================
# ExecutionContext
# =============================================================================

def test_unset_handles_raise_not_initialized():
    ctx = ExecutionContext()

    for name in ("browser", "context", "page"):
        with pytest.raises(NotInitializedError, match=name):
            getattr(ctx, name)
    assert ctx.is_active is False


def test_bind_and_invalidate(fake_page):
    ctx = ExecutionContext(scenario_name="Successful login")
    ctx.bind(browser=fake_page.context.browser, context=fake_page.context, page=fake_page)

    assert ctx.page is fake_page
    assert ctx.is_active is True
    assert "active" in repr(ctx)

    ctx.invalidate()
    assert ctx.is_active is False
    assert ctx.browser is fake_page.context.browser
    with pytest.raises(NotInitializedError):
        _ = ctx.page


# =============================================================================
# Bounded operations and errors
# =============================================================================

@pytest.mark.asyncio
async def test_run_bounded_completes():
    async def quick():
        return "done"

    assert await run_bounded(quick(), 1000, "Quick operation") is True


@pytest.mark.asyncio
async def test_run_bounded_times_out(log_messages):
    assert await run_bounded(asyncio.sleep(3600), 20, "Slow operation") is False
    assert "Slow operation timed out after 20 ms" in log_messages


@pytest.mark.asyncio
async def test_run_bounded_contains_errors(log_messages):
    async def broken():
        raise RuntimeError("socket closed")

    assert await run_bounded(broken(), 1000, "Broken operation") is False
    assert "Unexpected error during Broken operation: socket closed" in log_messages


def test_action_failed_message():
    cause = TimeoutError("Timeout 60000ms exceeded")
    error = ActionFailed("clicking the login button", cause)

    assert str(error) == "Failed to perform clicking the login button"
    assert error.action == "clicking the login button"
    assert error.cause is cause
