"""
================================================================================
E2E Tools
================================================================================

Infrastructure utilities shared by the browser suite.

Modules:
    - common: Configuration loading and logging setup
    - report_tools: Allure attachments and report generation

Example:
    from e2e_tools.common import init_logger, get_config
    from e2e_tools.report_tools.allure_utils import generate_allure_report

    init_logger()
    generate_allure_report("test-results/allure-results")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
