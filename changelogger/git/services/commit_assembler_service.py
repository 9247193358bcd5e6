"""Service assembling commit records from git data."""

import logging
from pathlib import Path

from changelogger.git.domain.entities import CommitRecord, FileChange
from changelogger.git.domain.errors import AssemblyError, DiffExtractionError, GitCommandError
from changelogger.git.domain.value_objects import ChangeKind, FileStat, IgnoreRuleSet
from changelogger.git.services.change_classifier import classify_file_stat
from changelogger.git.services.diff_extractor_service import DiffExtractorService
from changelogger.git.services.git_service import GitService
from changelogger.git.services.ignore_rules_service import IgnoreRulesService, is_ignored

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_DIFF_BYTES = 50_000


class CommitAssemblerService:
    """Service for building one CommitRecord per commit."""

    def __init__(
        self,
        git_service: GitService,
        diff_extractor: DiffExtractorService,
        ignore_rules_service: IgnoreRulesService,
        max_file_diff_bytes: int = DEFAULT_MAX_FILE_DIFF_BYTES,
    ) -> None:
        """
        Initialize CommitAssemblerService.

        Args:
            git_service: Service for fetching git commit data
            diff_extractor: Service for fetching filtered file diffs
            ignore_rules_service: Source of the repository ignore rules
            max_file_diff_bytes: Largest filtered diff kept for one file
        """
        self._git_service = git_service
        self._diff_extractor = diff_extractor
        self._ignore_rules_service = ignore_rules_service
        self._max_file_diff_bytes = max_file_diff_bytes

    def assemble(
        self,
        repo_path: Path,
        commit_hash: str | None = None,
        summarization_enabled: bool = False,
    ) -> CommitRecord:
        """
        Build the record of a commit.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit; None selects the latest commit
            summarization_enabled: Whether diffs should be captured for summarization

        Returns:
            CommitRecord with file changes in git listing order

        Raises:
            AssemblyError: If the commit or its file list cannot be read
        """
        try:
            commit_info = self._git_service.get_commit_info(repo_path, commit_hash)
        except GitCommandError as e:
            raise AssemblyError(f"Failed to read commit metadata: {e.message}") from e

        if commit_info is None:
            if commit_hash is None:
                raise AssemblyError(
                    "No commits found in repository",
                    "Create a commit before generating a changelog entry",
                )
            raise AssemblyError(f"Commit {commit_hash} not found in repository")

        logger.info("Assembling commit %s - %s", commit_info.hash, commit_info.message)

        try:
            file_stats = self._git_service.list_file_stats(repo_path, commit_info.hash)
        except GitCommandError as e:
            raise AssemblyError(
                f"Failed to list file changes for commit {commit_info.hash}: {e.message}"
            ) from e

        ruleset = (
            self._ignore_rules_service.load(repo_path) if summarization_enabled else IgnoreRuleSet()
        )

        changes = tuple(
            self._build_file_change(
                repo_path, commit_info.hash, stat, summarization_enabled, ruleset
            )
            for stat in file_stats
        )

        logger.info(
            "Assembled commit %s: %d file changes, %d eligible for summary",
            commit_info.hash,
            len(changes),
            sum(1 for change in changes if change.eligible_for_summary),
        )
        return CommitRecord(
            hash=commit_info.hash,
            message=commit_info.message,
            author_name=commit_info.author_name,
            author_email=commit_info.author_email,
            timestamp=commit_info.date,
            changes=changes,
        )

    def _build_file_change(
        self,
        repo_path: Path,
        commit_hash: str,
        stat: FileStat,
        summarization_enabled: bool,
        ruleset: IgnoreRuleSet,
    ) -> FileChange:
        kind = classify_file_stat(stat)

        if (
            not summarization_enabled
            or kind == ChangeKind.DELETED
            or is_ignored(stat.path, ruleset)
        ):
            return FileChange(path=stat.path, kind=kind)

        try:
            diff = self._diff_extractor.extract_file_diff(repo_path, commit_hash, stat.path)
        except DiffExtractionError as e:
            logger.warning("Skipping diff of %s: %s", stat.path, e)
            return FileChange(path=stat.path, kind=kind)

        diff_size = len(diff.encode("utf-8"))
        if diff_size > self._max_file_diff_bytes:
            logger.warning(
                "Diff of %s too large (%d bytes, limit %d), excluding it from summarization",
                stat.path,
                diff_size,
                self._max_file_diff_bytes,
            )
            return FileChange(path=stat.path, kind=kind)

        return FileChange(path=stat.path, kind=kind, diff=diff, eligible_for_summary=True)
