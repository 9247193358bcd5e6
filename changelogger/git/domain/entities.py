"""Git domain entities."""

from dataclasses import dataclass, field
from datetime import datetime

from changelogger.git.domain.value_objects import ChangeKind


@dataclass(frozen=True)
class FileChange:
    """A file touched by a commit.

    ``diff`` holds the filtered diff sent to the summarizer. It is set
    exactly when the file is eligible for summarization.
    """

    path: str
    kind: ChangeKind
    diff: str | None = None
    eligible_for_summary: bool = False
    diff_size: int | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        """Validate the diff/eligibility invariant and derive ``diff_size``."""
        if self.eligible_for_summary != (self.diff is not None):
            raise ValueError(
                f"File change for '{self.path}' must carry a diff if and only if "
                "it is eligible for summarization"
            )
        if self.diff is not None:
            object.__setattr__(self, "diff_size", len(self.diff.encode("utf-8")))

    @property
    def symbol(self) -> str:
        return self.kind.symbol


@dataclass(frozen=True)
class CommitRecord:
    """Commit entity with its classified file changes."""

    hash: str
    message: str
    author_name: str
    author_email: str
    timestamp: datetime
    changes: tuple[FileChange, ...] = ()

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    def changes_of_kind(self, kind: ChangeKind) -> tuple[FileChange, ...]:
        """Return the changes of one kind, in listing order."""
        return tuple(change for change in self.changes if change.kind == kind)

    @property
    def added(self) -> tuple[FileChange, ...]:
        return self.changes_of_kind(ChangeKind.ADDED)

    @property
    def modified(self) -> tuple[FileChange, ...]:
        return self.changes_of_kind(ChangeKind.MODIFIED)

    @property
    def deleted(self) -> tuple[FileChange, ...]:
        return self.changes_of_kind(ChangeKind.DELETED)

    @property
    def eligible_changes(self) -> tuple[FileChange, ...]:
        """Changes whose diff may be sent to the summarizer."""
        return tuple(
            change for change in self.changes if change.eligible_for_summary and change.diff
        )

    @property
    def total_diff_size(self) -> int:
        return sum(change.diff_size or 0 for change in self.changes)
