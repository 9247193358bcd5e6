"""Tests for building commit records from git data."""

from pathlib import Path

import pytest

from changelogger.git.domain.entities import FileChange
from changelogger.git.domain.errors import AssemblyError, GitCommandError
from changelogger.git.domain.value_objects import ChangeKind, FileStat
from changelogger.git.services.commit_assembler_service import CommitAssemblerService
from changelogger.git.services.diff_extractor_service import DiffExtractorService
from changelogger.git.services.git_service import GitService
from changelogger.git.services.ignore_rules_service import CLOGIGNORE_FILE, IgnoreRulesService

from fakes import FailingGitRepository, FakeGitRepository, diff_for

STATS = (
    FileStat("src/login.ts", 40, 0),
    FileStat("src/app.ts", 3, 1),
    FileStat("src/temp.js", 0, 12),
)
DIFFS = {
    "src/login.ts": diff_for("src/login.ts", added="export const login = () => {};"),
    "src/app.ts": diff_for("src/app.ts", added="login();", removed="// todo"),
    "src/temp.js": diff_for("src/temp.js", added="", removed="gone"),
}


def build_assembler(repository, max_file_diff_bytes=50_000):
    git_service = GitService(repository)
    return CommitAssemblerService(
        git_service,
        DiffExtractorService(git_service),
        IgnoreRulesService(),
        max_file_diff_bytes=max_file_diff_bytes,
    )


class TestAssemble:
    """CommitAssemblerService.assemble()."""

    def test_metadata_and_listing_order(self, tmp_path):
        repository = FakeGitRepository(stats=STATS, diffs=DIFFS)

        record = build_assembler(repository).assemble(tmp_path)

        assert record.hash == repository.commit_hash
        assert record.message == "Add login"
        assert record.author_name == "Jane Doe"
        assert record.author_email == "jane@example.com"
        assert [(c.path, c.kind) for c in record.changes] == [
            ("src/login.ts", ChangeKind.ADDED),
            ("src/app.ts", ChangeKind.MODIFIED),
            ("src/temp.js", ChangeKind.DELETED),
        ]

    def test_no_diffs_without_summarization(self, tmp_path):
        repository = FakeGitRepository(stats=STATS, diffs=DIFFS)

        record = build_assembler(repository).assemble(tmp_path, summarization_enabled=False)

        assert repository.diff_requests == []
        assert all(c.diff is None and not c.eligible_for_summary for c in record.changes)

    def test_deleted_files_are_never_eligible(self, tmp_path):
        repository = FakeGitRepository(stats=STATS, diffs=DIFFS)

        record = build_assembler(repository).assemble(tmp_path, summarization_enabled=True)

        assert "src/temp.js" not in repository.diff_requests
        assert [c.path for c in record.eligible_changes] == ["src/login.ts", "src/app.ts"]
        assert record.eligible_changes[0].diff_size == len(DIFFS["src/login.ts"].encode("utf-8")) - 1

    def test_ignored_files_are_listed_but_not_eligible(self, tmp_path):
        (tmp_path / CLOGIGNORE_FILE).write_text("app.ts\n", encoding="utf-8")
        repository = FakeGitRepository(stats=STATS, diffs=DIFFS)

        record = build_assembler(repository).assemble(tmp_path, summarization_enabled=True)

        assert len(record.changes) == 3
        assert [c.path for c in record.eligible_changes] == ["src/login.ts"]
        assert repository.diff_requests == ["src/login.ts"]

    def test_oversize_diff_is_not_eligible(self, tmp_path):
        big = diff_for("src/app.ts", added="x" * 500)
        repository = FakeGitRepository(stats=STATS, diffs={**DIFFS, "src/app.ts": big})

        record = build_assembler(repository, max_file_diff_bytes=300).assemble(
            tmp_path, summarization_enabled=True
        )

        app = next(c for c in record.changes if c.path == "src/app.ts")
        assert app.diff is None
        assert not app.eligible_for_summary
        assert [c.path for c in record.eligible_changes] == ["src/login.ts"]

    def test_diff_failures_skip_the_file_only(self, tmp_path):
        diffs = {**DIFFS, "src/app.ts": GitCommandError("fatal: path not in commit")}
        repository = FakeGitRepository(stats=STATS, diffs=diffs)

        record = build_assembler(repository).assemble(tmp_path, summarization_enabled=True)

        assert [c.path for c in record.changes] == ["src/login.ts", "src/app.ts", "src/temp.js"]
        assert [c.path for c in record.eligible_changes] == ["src/login.ts"]

    def test_binary_file_is_modified(self, tmp_path):
        repository = FakeGitRepository(stats=(FileStat("logo.png", None, None),))

        record = build_assembler(repository).assemble(tmp_path, summarization_enabled=True)

        assert record.changes[0].kind == ChangeKind.MODIFIED
        assert record.eligible_changes == ()

    def test_empty_commit(self, tmp_path):
        record = build_assembler(FakeGitRepository()).assemble(tmp_path)
        assert record.changes == ()

    def test_no_commits(self, tmp_path):
        with pytest.raises(AssemblyError) as exc_info:
            build_assembler(FakeGitRepository(has_commits=False)).assemble(tmp_path)

        assert exc_info.value.message == "No commits found in repository"
        assert exc_info.value.suggestion

    def test_unknown_commit(self, tmp_path):
        with pytest.raises(AssemblyError, match="Commit deadbeef not found"):
            build_assembler(FakeGitRepository()).assemble(tmp_path, "deadbeef")

    def test_listing_failure(self, tmp_path):
        with pytest.raises(AssemblyError, match="Failed to list file changes"):
            build_assembler(FailingGitRepository()).assemble(tmp_path)


class TestFileChangeInvariant:
    """FileChange diff/eligibility invariant."""

    def test_eligible_requires_diff(self):
        with pytest.raises(ValueError):
            FileChange(path="a.py", kind=ChangeKind.ADDED, eligible_for_summary=True)

    def test_diff_requires_eligibility(self):
        with pytest.raises(ValueError):
            FileChange(path="a.py", kind=ChangeKind.ADDED, diff="+x")

    def test_diff_size_in_utf8_bytes(self):
        change = FileChange(path="a.py", kind=ChangeKind.ADDED, diff="+é", eligible_for_summary=True)
        assert change.diff_size == 3
        assert FileChange(path="b.py", kind=ChangeKind.DELETED).diff_size is None


class TestGitService:
    """GitService normalization."""

    def test_blank_ref_selects_head(self, tmp_path):
        repository = FakeGitRepository()
        assert GitService(repository).get_commit_info(tmp_path, "  ").hash == repository.commit_hash

    def test_duplicate_paths_keep_first_entry(self, tmp_path):
        repository = FakeGitRepository(stats=(FileStat("a.py", 1, 0), FileStat("a.py", 0, 1)))
        assert GitService(repository).list_file_stats(tmp_path, "abc") == (FileStat("a.py", 1, 0),)
