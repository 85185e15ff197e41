"""
Artifact layout for scenario screenshots, traces, videos and logs.

    <report_dir>/<engine>/screenshots/<name>.png
    <report_dir>/<engine>/traces/<name>/<name>-trace.zip
    <report_dir>/<engine>/videos/<name>/
    <logs_dir>/<name>/log.log
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union


_WHITESPACE = re.compile(r"\s+")


def sanitize_scenario_name(name: str) -> str:
    """Replace each run of whitespace in a scenario name with one underscore."""
    return _WHITESPACE.sub("_", name)


@dataclass(frozen=True)
class ArtifactPaths:
    """Artifact locations for one scenario."""
    scenario: str
    screenshot: Path
    trace: Path
    video_dir: Path
    log_file: Path

    @classmethod
    def for_scenario(
        cls,
        report_dir: Union[str, Path],
        engine: str,
        scenario_name: str,
        logs_dir: Union[str, Path] = "test-results/logs",
    ) -> "ArtifactPaths":
        safe_name = sanitize_scenario_name(scenario_name)
        engine_root = Path(report_dir) / engine
        return cls(
            scenario=safe_name,
            screenshot=engine_root / "screenshots" / f"{safe_name}.png",
            trace=engine_root / "traces" / safe_name / f"{safe_name}-trace.zip",
            video_dir=engine_root / "videos" / safe_name,
            log_file=Path(logs_dir) / safe_name / "log.log",
        )


__all__ = ["ArtifactPaths", "sanitize_scenario_name"]
