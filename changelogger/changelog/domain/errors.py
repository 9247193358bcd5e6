"""Errors raised by the Changelog domain."""

from enum import Enum

from changelogger.errors import ChangeloggerError


class WriteErrorKind(str, Enum):
    """Reasons a changelog entry could not be persisted."""

    INVALID_PATH = "invalid_path"
    PERMISSION_DENIED = "permission_denied"
    DIRECTORY_CREATION_FAILED = "directory_creation_failed"
    IO_FAILURE = "io_failure"


_SUGGESTIONS = {
    WriteErrorKind.INVALID_PATH: "Set CHANGELOG_PATH to a valid file path",
    WriteErrorKind.PERMISSION_DENIED: "Check write permissions on the changelog directory",
    WriteErrorKind.DIRECTORY_CREATION_FAILED: "Create the changelog directory manually",
}


class ChangelogWriteError(ChangeloggerError):
    """Raised when the changelog entry was not written."""

    def __init__(self, kind: WriteErrorKind, message: str) -> None:
        super().__init__(message, _SUGGESTIONS.get(kind))
        self.kind = kind
