"""Throwaway git repository helpers for branch filter tests."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

OLD_DATE = "2020-01-01T00:00:00+00:00"
RECENT_DATE = "2024-01-01T00:00:00+00:00"
RECENT_EPOCH_MS = 1_704_067_200_000
# 2024-01-10T00:00:00Z
NOW_MS = 1_704_844_800_000


def git(cwd: Path, *args: str, date: str | None = None) -> str:
    env = dict(os.environ)
    if date is not None:
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )
    return result.stdout.strip()


def build_aged_repo(repo: Path) -> Path:
    """Repo with main and feature/new at a recent commit, old and tag v1 at an old one."""
    repo.mkdir()
    git(repo, "init")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")

    (repo / "README.md").write_text("# test\n", encoding="utf-8")
    git(repo, "add", "README.md")
    git(repo, "commit", "-m", "initial", date=OLD_DATE)
    git(repo, "branch", "-M", "main")
    git(repo, "branch", "old")
    git(repo, "tag", "v1")

    (repo / "CHANGELOG.md").write_text("- change\n", encoding="utf-8")
    git(repo, "add", "CHANGELOG.md")
    git(repo, "commit", "-m", "recent", date=RECENT_DATE)
    git(repo, "branch", "feature/new")
    return repo
