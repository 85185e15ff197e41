import json
import subprocess

from e2e_tools.report_tools.allure_utils import (
    AllureReportProcessor,
    RunSummary,
    prepare_results_dir,
)


def write_result(results_dir, name, status, start=0, stop=1000):
    (results_dir / f"{name}-result.json").write_text(
        json.dumps({"name": name, "status": status, "start": start, "stop": stop}),
        encoding="utf-8",
    )


def test_prepare_results_dir_empties_previous_run(tmp_path):
    results_dir = tmp_path / "allure-results"
    results_dir.mkdir()
    (results_dir / "stale-result.json").write_text("{}", encoding="utf-8")

    assert prepare_results_dir(results_dir) == results_dir
    assert results_dir.is_dir()
    assert list(results_dir.iterdir()) == []


def test_summary_counts_statuses(tmp_path):
    write_result(tmp_path, "a", "passed")
    write_result(tmp_path, "b", "passed")
    write_result(tmp_path, "c", "failed", stop=500)
    write_result(tmp_path, "d", "broken")
    (tmp_path / "e-result.json").write_text("not json", encoding="utf-8")

    summary = AllureReportProcessor(tmp_path).generate_summary()

    assert (summary.total, summary.passed, summary.failed, summary.broken) == (4, 2, 1, 1)
    assert summary.duration_ms == 3500
    assert summary.pass_rate == 50.0


def test_empty_summary():
    summary = RunSummary()
    assert summary.pass_rate == 0.0
    assert summary.to_dict()["pass_rate"] == "0.00%"


def test_generate_report_without_allure_cli(tmp_path, monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError("allure")

    monkeypatch.setattr(subprocess, "run", missing)
    processor = AllureReportProcessor(tmp_path / "results", tmp_path / "report")

    assert processor.generate_report() is False


def test_generate_report_copies_history(tmp_path, monkeypatch):
    report_dir = tmp_path / "report"
    (report_dir / "history").mkdir(parents=True)
    (report_dir / "history" / "history.json").write_text("[]", encoding="utf-8")
    results_dir = tmp_path / "results"
    results_dir.mkdir()
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert AllureReportProcessor(results_dir, report_dir).generate_report() is True
    assert (results_dir / "history" / "history.json").exists()
    assert calls[0][:2] == ["allure", "generate"]
