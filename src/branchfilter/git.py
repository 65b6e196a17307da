"""Local git repository as branch source and activity backend."""

from __future__ import annotations

import subprocess
from pathlib import Path

from branchfilter.types import BranchKind, BranchRef

HEADS_PREFIX = "refs/heads/"
TAGS_PREFIX = "refs/tags/"


class GitCommandError(RuntimeError):
    """A git plumbing command exited non-zero."""

    def __init__(self, args: list[str], returncode: int, stderr: str):
        super().__init__(f"git {' '.join(args)} failed ({returncode}): {stderr.strip()}")
        self.returncode = returncode


def _git(repo_root: Path, args: list[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
    completed = subprocess.run(
        ["git", *args],
        cwd=repo_root,
        check=False,
        capture_output=True,
        text=True,
    )
    if check and completed.returncode != 0:
        raise GitCommandError(args, completed.returncode, completed.stderr or completed.stdout)
    return completed


def find_repo_root(repo: Path | None = None) -> Path:
    """Top-level directory of the repository containing ``repo`` (or cwd)."""
    probe = (repo or Path.cwd()).resolve()
    try:
        root = _git(probe, ["rev-parse", "--show-toplevel"]).stdout.strip()
    except (GitCommandError, OSError) as exc:
        raise RuntimeError(f"not a git repository: {probe}") from exc
    if not root:
        raise RuntimeError(f"not a git repository: {probe}")
    return Path(root).resolve()


def ref_for(branch: BranchRef) -> str:
    """Map a BranchRef to the fully qualified git ref it names."""
    if branch.kind is BranchKind.PLAIN:
        return f"{HEADS_PREFIX}{branch.name}"
    if branch.kind is BranchKind.TAG:
        return f"{TAGS_PREFIX}{branch.name}"
    return branch.name


def discover_branches(repo_root: Path, *, include_tags: bool = True) -> tuple[BranchRef, ...]:
    """List local branches (and tags) as BranchRefs, heads first, each sorted by name."""
    namespaces = ["refs/heads"]
    if include_tags:
        namespaces.append("refs/tags")
    out = _git(repo_root, ["for-each-ref", "--format=%(refname)", *namespaces]).stdout

    branches: list[BranchRef] = []
    for line in out.splitlines():
        ref = line.strip()
        if ref.startswith(HEADS_PREFIX):
            branches.append(BranchRef(ref[len(HEADS_PREFIX):], BranchKind.PLAIN))
        elif ref.startswith(TAGS_PREFIX):
            branches.append(BranchRef(ref[len(TAGS_PREFIX):], BranchKind.TAG))
    branches.sort(key=lambda item: (item.kind is BranchKind.TAG, item.name))
    return tuple(branches)


class GitFileSystem:
    """View of the commit a branch head points at."""

    def __init__(self, repo_root: Path, commit: str):
        self.repo_root = repo_root
        self.commit = commit
        self.closed = False

    def last_modified(self) -> int:
        """Committer time of the head commit in epoch milliseconds, 0 if unknown."""
        if self.closed:
            raise RuntimeError(f"filesystem view for {self.commit} is closed")
        seconds = _git(self.repo_root, ["log", "-1", "--format=%ct", self.commit]).stdout.strip()
        return int(seconds) * 1000 if seconds else 0

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> GitFileSystem:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class GitSource:
    """ScmSource backed by a local repository."""

    def __init__(self, repo_root: Path):
        self.repo_root = repo_root.resolve()

    def head_commit(self, branch: BranchRef) -> str | None:
        """Commit id the branch resolves to, or None when the ref is unknown."""
        completed = _git(
            self.repo_root,
            ["rev-parse", "--verify", "--quiet", f"{ref_for(branch)}^{{commit}}"],
            check=False,
        )
        commit = completed.stdout.strip()
        if completed.returncode != 0 or not commit:
            return None
        return commit

    def open_filesystem(self, branch: BranchRef) -> GitFileSystem | None:
        commit = self.head_commit(branch)
        if commit is None:
            return None
        return GitFileSystem(self.repo_root, commit)
