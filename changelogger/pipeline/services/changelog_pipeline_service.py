"""Pipeline turning one commit into one changelog entry."""

import logging
from pathlib import Path

from changelogger.changelog.domain.errors import ChangelogWriteError
from changelogger.changelog.domain.value_objects import ChangelogStats
from changelogger.changelog.services.changelog_renderer import render_entry
from changelogger.changelog.services.changelog_writer_service import (
    ChangelogWriterService,
    resolve_changelog_path,
)
from changelogger.errors import ValidationError
from changelogger.git.domain.entities import CommitRecord
from changelogger.git.domain.errors import AssemblyError
from changelogger.git.services.commit_assembler_service import CommitAssemblerService
from changelogger.pipeline.domain.value_objects import PipelineResult
from changelogger.summarization.domain.errors import SummarizationError
from changelogger.summarization.domain.value_objects import Summary
from changelogger.summarization.services.summarization_service import SummarizationService

logger = logging.getLogger(__name__)


class ChangelogPipeline:
    """Assembles a commit, optionally summarizes it, then appends it to the changelog."""

    def __init__(
        self,
        assembler: CommitAssemblerService,
        writer: ChangelogWriterService,
        summarization_service: SummarizationService | None = None,
        changelog_path: str | Path = "CHANGELOG.md",
        summarization_enabled: bool = False,
        degradation_reason: str | None = None,
    ) -> None:
        """
        Initialize ChangelogPipeline.

        Args:
            assembler: Service building commit records
            writer: Service appending entries to the changelog file
            summarization_service: Client of the remote summarizer, if any
            changelog_path: Changelog file, relative to the repository root unless absolute
            summarization_enabled: Whether summaries are requested
            degradation_reason: Why summarization was switched off while building the pipeline
        """
        self._assembler = assembler
        self._writer = writer
        self._summarization_service = summarization_service
        self._changelog_path = changelog_path
        self._summarization_enabled = (
            summarization_enabled
            and summarization_service is not None
            and summarization_service.is_initialized
        )
        self.degradation_reason = degradation_reason

    @property
    def summarization_enabled(self) -> bool:
        return self._summarization_enabled

    def process_commit(
        self,
        repo_path: Path,
        commit_hash: str | None = None,
        extra_context: str | None = None,
    ) -> PipelineResult:
        """
        Write the changelog entry of a commit.

        Summarization failures never prevent the write; the entry then says
        why no summary is available.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit; None selects the latest commit
            extra_context: Optional context passed to the summarizer

        Returns:
            PipelineResult; ``success`` is False only when nothing was persisted
        """
        try:
            record = self._assembler.assemble(repo_path, commit_hash, self._summarization_enabled)
        except AssemblyError as e:
            logger.error("Failed to extract commit data: %s", e)
            return PipelineResult(success=False, commit_hash=commit_hash, error=e)

        summary, summary_error, summary_note = self._summarize(record, extra_context)

        try:
            target = resolve_changelog_path(self._changelog_path, repo_path)
            write_result = self._writer.append(
                record,
                target,
                summary=summary.text if summary else None,
                summarization_requested=self._summarization_enabled,
                summary_note=summary_note,
            )
        except ChangelogWriteError as e:
            logger.error("Failed to write changelog: %s", e)
            return PipelineResult(
                success=False,
                commit_hash=record.hash,
                summary_error=summary_error,
                error=e,
            )

        return PipelineResult(
            success=True,
            commit_hash=record.hash,
            changelog_path=write_result.path,
            stats=write_result.stats,
            summary_generated=summary is not None,
            token_usage=summary.token_usage if summary else None,
            summary_error=summary_error,
            changelog_entry=write_result.entry,
        )

    def preview_commit(
        self,
        repo_path: Path,
        commit_hash: str | None = None,
        extra_context: str | None = None,
    ) -> PipelineResult:
        """
        Render the changelog entry of a commit without writing it.

        The summarizer is still called when summaries are enabled.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit; None selects the latest commit
            extra_context: Optional context passed to the summarizer

        Returns:
            PipelineResult with ``changelog_entry`` set and no ``changelog_path``
        """
        try:
            record = self._assembler.assemble(repo_path, commit_hash, self._summarization_enabled)
        except AssemblyError as e:
            logger.error("Failed to extract commit data: %s", e)
            return PipelineResult(success=False, commit_hash=commit_hash, error=e)

        summary, summary_error, summary_note = self._summarize(record, extra_context)

        entry = render_entry(
            record,
            summary=summary.text if summary else None,
            summarization_requested=self._summarization_enabled,
            summary_note=summary_note,
        )
        return PipelineResult(
            success=True,
            commit_hash=record.hash,
            stats=ChangelogStats.from_record(record, self._summarization_enabled),
            summary_generated=summary is not None,
            token_usage=summary.token_usage if summary else None,
            summary_error=summary_error,
            changelog_entry=entry,
        )

    def _summarize(
        self, record: CommitRecord, extra_context: str | None
    ) -> tuple[Summary | None, SummarizationError | None, str | None]:
        """Summarize a record, returning (summary, error, note for the entry)."""
        if (
            not self._summarization_enabled
            or self._summarization_service is None
            or not record.eligible_changes
        ):
            return None, None, None
        try:
            return self._summarization_service.summarize(record, extra_context), None, None
        except SummarizationError as e:
            logger.warning(
                "Summary of %s unavailable (%s), writing entry without it: %s",
                record.short_hash,
                e.kind.value,
                e.message,
            )
            return None, e, e.message
        except ValidationError as e:
            logger.warning("Summary of %s skipped: %s", record.short_hash, e.message)
            return None, None, e.message
