"""Errors raised by the Git domain."""

from enum import Enum

from changelogger.errors import ChangeloggerError


class DiffExtractionFailure(str, Enum):
    """Why a file diff could not be extracted."""

    NO_CONTENT = "no_content"
    GIT_FAILURE = "git_failure"


class DiffExtractionError(ChangeloggerError):
    """Raised when the diff of a single file is unavailable.

    Callers skip the file for summarization; it stays in the changelog.
    """

    def __init__(self, file_path: str, reason: DiffExtractionFailure, detail: str = "") -> None:
        message = f"No diff available for {file_path}: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.file_path = file_path
        self.reason = reason


class AssemblyError(ChangeloggerError):
    """Raised when a commit record cannot be built at all."""


class GitCommandError(ChangeloggerError):
    """Raised when a git command exits with an error."""
