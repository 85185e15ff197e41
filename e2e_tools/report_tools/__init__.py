"""
Allure attachment helpers and report generation.
"""

from .allure_utils import (
    AllureReportProcessor,
    RunSummary,
    attach_file,
    attach_png,
    attach_text,
    generate_allure_report,
    prepare_results_dir,
)

__all__ = [
    "AllureReportProcessor",
    "RunSummary",
    "attach_file",
    "attach_png",
    "attach_text",
    "generate_allure_report",
    "prepare_results_dir",
]
