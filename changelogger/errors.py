"""Base error types shared by all changelogger domains."""


class ChangeloggerError(Exception):
    """Base class for every error raised by the changelog pipeline.

    Attributes:
        message: Human-readable description of the failure
        suggestion: Optional remedial action to show to the user
    """

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message} ({self.suggestion})"
        return self.message


class ValidationError(ChangeloggerError):
    """Raised when an input does not have the expected shape."""
