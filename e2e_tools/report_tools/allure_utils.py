"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for attaching browser artifacts to Allure and for turning the raw
allure-results of a run into an HTML report.

Features:
- Screenshot / trace / video / text attachments
- Results directory preparation before a run
- Run summary from result files
- History carry-over between reports

================================================================================
"""

import json
import shutil
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_text(text: str, name: str = "Text"):
    """Attach text content to the Allure report."""
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_png(image: bytes, name: str = "Screenshot"):
    """Attach PNG bytes to the Allure report."""
    allure.attach(
        image,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


_FILE_ATTACHMENT_TYPES = {
    ".png": allure.attachment_type.PNG,
    ".webm": allure.attachment_type.WEBM,
    ".log": allure.attachment_type.TEXT,
    ".txt": allure.attachment_type.TEXT,
}


def attach_file(path: Union[str, Path], name: Optional[str] = None):
    """
    Attach a file from disk to the Allure report.

    Trace archives have no dedicated Allure type and are attached with an
    explicit ``.zip`` extension so they can be downloaded from the report.

    Args:
        path: File to attach
        name: Attachment name (defaults to the file name)
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Attachment skipped, file not found: {path}")
        return

    attachment_type = _FILE_ATTACHMENT_TYPES.get(path.suffix.lower())
    if attachment_type is not None:
        allure.attach.file(str(path), name=name or path.name, attachment_type=attachment_type)
    else:
        allure.attach.file(str(path), name=name or path.name, extension=path.suffix.lstrip("."))


def prepare_results_dir(results_dir: Union[str, Path]) -> Path:
    """
    Ensure the results directory exists and is empty.

    Failures are logged; a stale results directory must not block the run.

    Returns:
        The results directory path
    """
    results_dir = Path(results_dir)
    try:
        if results_dir.exists():
            shutil.rmtree(results_dir)
        results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Prepared results directory: {results_dir}")
    except OSError as e:
        logger.info(f"Folder not created! {e}")
    return results_dir


# ================================================================================
# Report Processing
# ================================================================================

@dataclass
class RunSummary:
    """Summary of one run's scenario results."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "broken": self.broken,
            "skipped": self.skipped,
            "unknown": self.unknown,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
        }


class AllureReportProcessor:
    """
    Processes Allure results and generates reports.

    Provides methods for summarizing results, generating the HTML report
    and carrying history over between runs.
    """

    def __init__(
        self,
        results_dir: Path,
        report_dir: Optional[Path] = None,
    ):
        """
        Initialize processor.

        Args:
            results_dir: Allure results directory
            report_dir: Output report directory
        """
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "reports")

    def parse_results(self) -> List[Dict[str, Any]]:
        """
        Parse Allure result files.

        Returns:
            List of result dictionaries
        """
        results = []

        for result_file in self.results_dir.glob("*-result.json"):
            try:
                with open(result_file, encoding="utf-8") as f:
                    results.append(json.load(f))
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to parse {result_file}: {e}")

        return results

    def generate_summary(self) -> RunSummary:
        """Build a RunSummary from the parsed results."""
        summary = RunSummary()

        for result in self.parse_results():
            summary.total += 1
            status = result.get("status", "unknown")
            if status == "passed":
                summary.passed += 1
            elif status == "failed":
                summary.failed += 1
            elif status == "broken":
                summary.broken += 1
            elif status == "skipped":
                summary.skipped += 1
            else:
                summary.unknown += 1

            summary.duration_ms += result.get("stop", 0) - result.get("start", 0)

        return summary

    def copy_history(self) -> None:
        """Copy history from the previous report into the results."""
        history_source = self.report_dir / "history"
        history_dest = self.results_dir / "history"

        if history_source.exists():
            if history_dest.exists():
                shutil.rmtree(history_dest)
            shutil.copytree(history_source, history_dest)
            logger.info("Copied history from previous report")

    def generate_report(self) -> bool:
        """
        Generate the Allure HTML report.

        Returns:
            True if successful
        """
        self.copy_history()

        cmd = [
            "allure", "generate",
            str(self.results_dir),
            "-o", str(self.report_dir),
            "--clean"
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.error("Allure command not found. Install allure-commandline.")
            return False

        if result.returncode != 0:
            logger.error(f"Report generation failed: {result.stderr}")
            return False

        logger.info(f"Report generated at {self.report_dir}")
        return True

    def log_summary(self) -> RunSummary:
        """Log the run summary and return it."""
        summary = self.generate_summary()

        logger.info("=" * 60)
        logger.info("SCENARIO EXECUTION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Total:      {summary.total}")
        logger.info(f"Passed:     {summary.passed}")
        logger.info(f"Failed:     {summary.failed}")
        logger.info(f"Broken:     {summary.broken}")
        logger.info(f"Skipped:    {summary.skipped}")
        logger.info(f"Pass Rate:  {summary.pass_rate:.2f}%")
        logger.info(f"Duration:   {summary.duration_ms / 1000:.2f}s")
        logger.info("=" * 60)
        return summary


# ================================================================================
# Convenience Functions
# ================================================================================

def generate_allure_report(
    results_dir: str,
    output_dir: Optional[str] = None,
) -> bool:
    """
    Generate Allure report from results.

    Args:
        results_dir: Path to allure-results directory
        output_dir: Optional output directory

    Returns:
        True if successful
    """
    processor = AllureReportProcessor(
        Path(results_dir),
        Path(output_dir) if output_dir else None
    )

    success = processor.generate_report()
    if success:
        processor.log_summary()

    return success


__all__ = [
    "attach_text",
    "attach_png",
    "attach_file",
    "prepare_results_dir",
    "RunSummary",
    "AllureReportProcessor",
    "generate_allure_report",
]
