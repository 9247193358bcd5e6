"""Value objects for Changelog domain."""

from dataclasses import dataclass
from pathlib import Path

from changelogger.git.domain.entities import CommitRecord


@dataclass(frozen=True)
class ChangelogStats:
    """File counts of one changelog entry.

    Attributes:
        eligible_files: Files sent for summarization, None when no summary was requested
    """

    total_files: int
    added_files: int
    modified_files: int
    deleted_files: int
    eligible_files: int | None = None

    @classmethod
    def from_record(cls, record: CommitRecord, summarization_requested: bool = False) -> "ChangelogStats":
        return cls(
            total_files=len(record.changes),
            added_files=len(record.added),
            modified_files=len(record.modified),
            deleted_files=len(record.deleted),
            eligible_files=len(record.eligible_changes) if summarization_requested else None,
        )


@dataclass(frozen=True)
class ChangelogWriteResult:
    """Outcome of a successful append."""

    path: Path
    entry: str
    stats: ChangelogStats
    created: bool = False
    backup_path: Path | None = None
