"""Value objects for Pipeline domain."""

from dataclasses import dataclass
from pathlib import Path

from changelogger.changelog.domain.value_objects import ChangelogStats
from changelogger.errors import ChangeloggerError
from changelogger.summarization.domain.errors import SummarizationError
from changelogger.summarization.domain.value_objects import TokenUsage


@dataclass(frozen=True)
class PipelineResult:
    """Result of processing one commit, for display layers.

    ``error`` is set when nothing was persisted. ``summary_error`` is set when
    the entry was written without the requested summary.
    """

    success: bool
    commit_hash: str | None = None
    changelog_path: Path | None = None
    stats: ChangelogStats | None = None
    summary_generated: bool = False
    token_usage: TokenUsage | None = None
    summary_error: SummarizationError | None = None
    error: ChangeloggerError | None = None
    changelog_entry: str | None = None
