"""CLI tests for branchfilter commands."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from branchfilter.cli import app

from tests.unit.branchfilter.git_test_utils import NOW_MS


def test_evaluate_json_output(aged_repo: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["evaluate", "--repo", str(aged_repo), "--inactivity-days", "30", "--now-ms", str(NOW_MS), "--json"],
    )
    assert result.exit_code == 0, result.output

    rows = [json.loads(line) for line in result.stdout.splitlines() if line.startswith("{")]
    by_name = {row["branch"]: row for row in rows}
    assert set(by_name) == {"feature/new", "main", "old", "v1"}
    assert by_name["old"]["decision"] == "exclude"
    assert by_name["main"]["reason"] == "allowlist"
    assert by_name["v1"]["kind"] == "tag"


def test_evaluate_reads_repo_config(aged_repo: Path) -> None:
    (aged_repo / ".branchfilter.yaml").write_text("inactivity_days: 30\ndeny_list: [feature/.*]\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(app, ["evaluate", "--repo", str(aged_repo), "--now-ms", str(NOW_MS), "--json", "--no-tags"])
    assert result.exit_code == 0, result.output

    rows = {}
    for line in result.stdout.splitlines():
        if line.startswith("{"):
            row = json.loads(line)
            rows[row["branch"]] = row
    assert rows["feature/new"]["reason"] == "denylist"
    assert "v1" not in rows


def test_evaluate_rejects_bad_config(aged_repo: Path) -> None:
    (aged_repo / ".branchfilter.yaml").write_text("inactivity_days: soon\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["evaluate", "--repo", str(aged_repo)])
    assert result.exit_code == 1
    assert "inactivity_days must be an integer" in result.output


def test_evaluate_outside_repository(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["evaluate", "--repo", str(tmp_path)])
    assert result.exit_code == 1


def test_patterns_reports_invalid_entries() -> None:
    result = CliRunner().invoke(app, ["patterns", "master\nmain,,\n feature/(.*"])
    assert result.exit_code == 1
    assert "pattern=master" in result.output
    assert "pattern=main" in result.output
    assert "invalid=feature/(.*" in result.output


def test_patterns_all_valid() -> None:
    result = CliRunner().invoke(app, ["patterns", "wip/.*\nwip/.*"])
    assert result.exit_code == 0
    assert result.output.count("pattern=wip/.*") == 1


def test_init_writes_config(tmp_path: Path) -> None:
    runner = CliRunner()
    first = runner.invoke(app, ["init", "--repo", str(tmp_path)])
    assert first.exit_code == 0
    assert (tmp_path / ".branchfilter.yaml").exists()

    second = runner.invoke(app, ["init", "--repo", str(tmp_path)])
    assert second.exit_code == 1


def test_evaluate_warning_names_bracketed_invalid_pattern(aged_repo: Path) -> None:
    result = CliRunner().invoke(app, ["evaluate", "--repo", str(aged_repo), "--deny", "[z-a]", "--json"])
    assert result.exit_code == 0, result.output
    assert "'[z-a]'" in result.output


def test_evaluate_explicit_missing_config_is_an_error(aged_repo: Path, tmp_path: Path) -> None:
    missing = tmp_path / "nowhere" / "filter.yaml"
    result = CliRunner().invoke(app, ["evaluate", "--repo", str(aged_repo), "--config", str(missing), "--json"])
    assert result.exit_code == 1
    assert "Missing branch filter config" in result.output


def test_evaluate_verbose_prints_each_decision_once(aged_repo: Path) -> None:
    result = CliRunner().invoke(
        app,
        ["evaluate", "--repo", str(aged_repo), "--inactivity-days", "30", "--now-ms", str(NOW_MS), "--json", "-v"],
    )
    assert result.exit_code == 0, result.output
    assert result.output.count("InactiveBranchFilter: old decision=exclude reason=age-check") == 1
