"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the suite's markers (including the tags used in feature files)
and keeps the real-browser scenarios behind the `--run-ui` switch.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests running against stub browser objects"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Real-browser scenarios (enable with --run-ui)"
    )
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )


def pytest_collection_modifyitems(config, items):
    """
    Add markers by location and skip browser scenarios unless requested.
    """
    run_ui = config.getoption("--run-ui")
    skip_ui = pytest.mark.skip(reason="real-browser scenarios need --run-ui")

    for item in items:
        path = str(item.fspath)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
            if not run_ui:
                item.add_marker(skip_ui)
        elif "unit" in path:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Browser E2E Login Suite",
        "=" * 60,
        "",
    ]
