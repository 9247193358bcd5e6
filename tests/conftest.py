"""Shared pytest fixtures for changelogger tests."""

import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from changelogger.git.domain.entities import CommitRecord, FileChange
from changelogger.git.domain.value_objects import ChangeKind

from fakes import COMMIT_DATE, run_git


@pytest.fixture
def make_record() -> Callable[..., CommitRecord]:
    """Factory building commit records from (path, kind, diff) tuples."""

    def _make(
        changes: tuple[tuple[str, ChangeKind, str | None], ...] = (),
        message: str = "Add login",
        commit_hash: str = "a1b2c3d4e5f6a7b8c9d0a1b2c3d4e5f6a7b8c9d0",
    ) -> CommitRecord:
        return CommitRecord(
            hash=commit_hash,
            message=message,
            author_name="Jane Doe",
            author_email="jane@example.com",
            timestamp=COMMIT_DATE,
            changes=tuple(
                FileChange(path=path, kind=kind, diff=diff, eligible_for_summary=diff is not None)
                for path, kind, diff in changes
            ),
        )

    return _make


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Empty git repository with a configured identity."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "config", "user.name", "Jane Doe")
    run_git(repo, "config", "user.email", "jane@example.com")
    run_git(repo, "config", "commit.gpgsign", "false")
    return repo
