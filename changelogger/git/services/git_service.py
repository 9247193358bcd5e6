"""Git service for coordinating Git operations."""

import logging
from pathlib import Path

from changelogger.git.domain.value_objects import CommitInfo, FileStat
from changelogger.git.repositories.interfaces import GitRepository

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_REF = "HEAD"


class GitService:
    """Service reading commit data through a GitRepository."""

    def __init__(self, git_repository: GitRepository) -> None:
        self._git_repository = git_repository

    def get_commit_info(self, repo_path: Path, commit_ref: str | None = None) -> CommitInfo | None:
        """
        Look up a commit, the latest one when no reference is given.

        Args:
            repo_path: Repository to read
            commit_ref: Hash or revision; None or blank selects HEAD

        Returns:
            CommitInfo, or None if nothing matches the reference
        """
        ref = (commit_ref or "").strip() or DEFAULT_COMMIT_REF
        return self._git_repository.get_commit_info(repo_path, ref)

    def list_file_stats(self, repo_path: Path, commit_hash: str) -> tuple[FileStat, ...]:
        """
        Get the line statistics of every file touched by a commit.

        A path listed twice keeps its first entry.
        """
        seen: set[str] = set()
        stats: list[FileStat] = []
        for stat in self._git_repository.list_file_stats(repo_path, commit_hash):
            if stat.path in seen:
                logger.debug("Ignoring duplicate listing of %s in %s", stat.path, commit_hash)
                continue
            seen.add(stat.path)
            stats.append(stat)
        return tuple(stats)

    def get_file_diff(self, repo_path: Path, commit_hash: str, file_path: str) -> str:
        return self._git_repository.get_file_diff(repo_path, commit_hash, file_path)
