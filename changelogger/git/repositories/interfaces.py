"""Repository interfaces for Git operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from changelogger.git.domain.value_objects import CommitInfo, FileStat


class GitRepository(ABC):
    """Interface for Git repository operations."""

    @abstractmethod
    def get_commit_info(self, repo_path: Path, commit_ref: str = "HEAD") -> CommitInfo | None:
        """
        Get the metadata of a commit.

        Args:
            repo_path: Path to the git repository
            commit_ref: Commit hash or revision, HEAD by default

        Returns:
            CommitInfo, or None if the revision does not name a commit
            (for instance in a repository without any commit)
        """
        ...

    @abstractmethod
    def list_file_stats(self, repo_path: Path, commit_hash: str) -> tuple[FileStat, ...]:
        """
        List per-file insertion and deletion counts of a commit.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit

        Returns:
            Tuple of FileStat in the order git lists them
        """
        ...

    @abstractmethod
    def get_file_diff(self, repo_path: Path, commit_hash: str, file_path: str) -> str:
        """
        Get the unified diff of a single file between a commit and its parent.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit
            file_path: Path to the file relative to repository root

        Returns:
            Raw unified diff, possibly empty
        """
        ...
