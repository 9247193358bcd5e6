"""Factory assembling the changelog pipeline from settings."""

import logging

from changelogger.changelog.services.changelog_writer_service import ChangelogWriterService
from changelogger.config.settings import Settings
from changelogger.git.repositories.implementations import GitRepositoryImpl
from changelogger.git.repositories.interfaces import GitRepository
from changelogger.git.services.commit_assembler_service import CommitAssemblerService
from changelogger.git.services.diff_extractor_service import DiffExtractorService
from changelogger.git.services.git_service import GitService
from changelogger.git.services.ignore_rules_service import IgnoreRulesService
from changelogger.pipeline.services.changelog_pipeline_service import ChangelogPipeline
from changelogger.summarization.domain.value_objects import SummarizationConfig
from changelogger.summarization.repositories.factory import create_llm_agent
from changelogger.summarization.repositories.interfaces import LLMAgentRepository
from changelogger.summarization.services.summarization_service import SummarizationService

logger = logging.getLogger(__name__)


def create_summarization_service(
    settings: Settings, llm_agent: LLMAgentRepository | None = None
) -> tuple[SummarizationService | None, str | None]:
    """
    Create the summarization client, checking connectivity when configured.

    Args:
        settings: Settings with provider, credential and limits
        llm_agent: Agent to use instead of creating one from settings

    Returns:
        Tuple of (service or None, reason summarization is unavailable or None)
    """
    if llm_agent is None:
        try:
            llm_agent = create_llm_agent(settings)
        except ValueError as e:
            return None, str(e)

    service = SummarizationService(
        llm_agent,
        SummarizationConfig(
            max_sentences=settings.max_sentences,
            max_prompt_tokens=settings.max_prompt_tokens,
        ),
    )

    if settings.verify_connection and not service.verify_connection():
        return None, f"Connection test to {llm_agent.name} failed"

    return service, None


def build_pipeline(
    settings: Settings,
    git_repository: GitRepository | None = None,
    llm_agent: LLMAgentRepository | None = None,
) -> ChangelogPipeline:
    """
    Build a pipeline with explicit service instances.

    When AI mode is configured but the summarizer is unavailable, the
    pipeline falls back to local-only entries.

    Args:
        settings: Runtime settings
        git_repository: Git implementation; defaults to the git command line
        llm_agent: Agent to use instead of creating one from settings

    Returns:
        Ready-to-use ChangelogPipeline
    """
    git_service = GitService(git_repository or GitRepositoryImpl())
    assembler = CommitAssemblerService(
        git_service,
        DiffExtractorService(git_service),
        IgnoreRulesService(),
        max_file_diff_bytes=settings.max_file_diff_bytes,
    )

    summarization_service = None
    degradation_reason = None
    if settings.summarization_enabled:
        summarization_service, degradation_reason = create_summarization_service(
            settings, llm_agent
        )
        if degradation_reason:
            logger.warning("AI summaries disabled, using base mode: %s", degradation_reason)

    return ChangelogPipeline(
        assembler=assembler,
        writer=ChangelogWriterService(create_backup=settings.create_backup),
        summarization_service=summarization_service,
        changelog_path=settings.changelog_path,
        summarization_enabled=summarization_service is not None,
        degradation_reason=degradation_reason,
    )
