"""Errors raised by the Summarization domain."""

from enum import Enum

from changelogger.errors import ChangeloggerError


class SummarizationErrorKind(str, Enum):
    """Failure categories of a summarization request."""

    QUOTA_EXCEEDED = "quota_exceeded"
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    MODEL_ACCESS_DENIED = "model_access_denied"
    PROMPT_TOO_LARGE = "prompt_too_large"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"

    @property
    def suggestion(self) -> str | None:
        """Remedial action to offer the user for this kind of failure."""
        return _SUGGESTIONS.get(self)


_SUGGESTIONS = {
    SummarizationErrorKind.QUOTA_EXCEEDED: (
        "Switch to base mode (CHANGELOGGER_MODE=base) or check your billing at "
        "https://platform.openai.com/account/billing"
    ),
    SummarizationErrorKind.AUTHENTICATION_FAILED: (
        "Update the API key in your .env file or environment"
    ),
    SummarizationErrorKind.RATE_LIMITED: (
        "Wait a moment before retrying, or switch to base mode"
    ),
    SummarizationErrorKind.MODEL_ACCESS_DENIED: (
        "Check that your account has access to the configured model"
    ),
    SummarizationErrorKind.PROMPT_TOO_LARGE: (
        "Reduce the number of files or add patterns to .clogignore"
    ),
    SummarizationErrorKind.TIMEOUT: (
        "Increase CHANGELOGGER_TIMEOUT or retry later"
    ),
}


class SummarizationError(ChangeloggerError):
    """Raised when a summary cannot be produced.

    Always recoverable: the changelog entry is written without a summary.
    """

    def __init__(self, kind: SummarizationErrorKind, message: str) -> None:
        super().__init__(message, kind.suggestion)
        self.kind = kind
