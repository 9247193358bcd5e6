"""Service extracting per-file diffs reduced to their changed lines."""

import logging
from pathlib import Path

from changelogger.git.domain.errors import (
    DiffExtractionError,
    DiffExtractionFailure,
    GitCommandError,
)
from changelogger.git.services.git_service import GitService

logger = logging.getLogger(__name__)

_FILE_HEADER_PREFIXES = ("diff --git", "index ", "+++", "---")
_HUNK_LINE_PREFIXES = ("+", "-", " ")


def filter_diff(diff: str) -> str:
    """
    Reduce a unified diff to file headers, hunk headers and hunk lines.

    Inside a hunk only added, removed and context lines are kept. Filtering
    an already filtered diff returns it unchanged. If filtering fails the
    original diff is returned.

    Args:
        diff: Raw unified diff

    Returns:
        Filtered diff
    """
    try:
        lines = diff.split("\n")
        kept: list[str] = []
        in_hunk = False

        for line in lines:
            if line.startswith(_FILE_HEADER_PREFIXES):
                kept.append(line)
                continue
            if line.startswith("@@"):
                kept.append(line)
                in_hunk = True
                continue
            if in_hunk and line.startswith(_HUNK_LINE_PREFIXES):
                kept.append(line)

        logger.debug("Filtered diff from %d to %d lines", len(lines), len(kept))
        return "\n".join(kept)
    except Exception:
        logger.exception("Error filtering diff content, keeping the original diff")
        return diff


class DiffExtractorService:
    """Service for fetching filtered diffs of single files."""

    def __init__(self, git_service: GitService) -> None:
        """
        Initialize DiffExtractorService.

        Args:
            git_service: Service for fetching git commit data
        """
        self._git_service = git_service

    def extract_file_diff(self, repo_path: Path, commit_hash: str, file_path: str) -> str:
        """
        Get the filtered diff of one file between a commit and its parent.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit
            file_path: Path to the file relative to repository root

        Returns:
            Filtered diff text

        Raises:
            DiffExtractionError: If git fails or the diff has no hunk
        """
        try:
            raw_diff = self._git_service.get_file_diff(repo_path, commit_hash, file_path)
        except GitCommandError as e:
            raise DiffExtractionError(
                file_path, DiffExtractionFailure.GIT_FAILURE, e.message
            ) from e

        if not raw_diff or not raw_diff.strip():
            raise DiffExtractionError(file_path, DiffExtractionFailure.NO_CONTENT)

        filtered = filter_diff(raw_diff)
        # binary files and mode-only changes have headers but no hunk
        if not any(line.startswith("@@") for line in filtered.split("\n")):
            raise DiffExtractionError(file_path, DiffExtractionFailure.NO_CONTENT)
        logger.debug("Extracted diff for %s (%d characters)", file_path, len(filtered))
        return filtered
