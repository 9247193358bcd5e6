"""Summarization service turning commit records into short summaries."""

import logging
import math

from changelogger.errors import ValidationError
from changelogger.git.domain.entities import CommitRecord
from changelogger.summarization.domain.errors import SummarizationError, SummarizationErrorKind
from changelogger.summarization.domain.value_objects import SummarizationConfig, Summary
from changelogger.summarization.repositories.interfaces import LLMAgentRepository

logger = logging.getLogger(__name__)

CONNECTION_TEST_PROMPT = 'Test connection. Please respond with "OK".'


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


class SummarizationService:
    """Service for requesting commit summaries from an LLM agent."""

    def __init__(
        self,
        llm_agent: LLMAgentRepository | None,
        config: SummarizationConfig | None = None,
    ) -> None:
        """
        Initialize SummarizationService.

        Args:
            llm_agent: Agent used for requests; None when no credential is configured
            config: Sentence and prompt limits. Defaults to SummarizationConfig()
        """
        self._llm_agent = llm_agent
        self._config = config or SummarizationConfig()

    @property
    def is_initialized(self) -> bool:
        return self._llm_agent is not None

    @property
    def config(self) -> SummarizationConfig:
        return self._config

    def summarize(self, record: CommitRecord, extra_context: str | None = None) -> Summary:
        """
        Generate a short summary of a commit.

        Args:
            record: Commit record with the filtered diffs of eligible files
            extra_context: Optional text appended to the prompt

        Returns:
            Summary with token usage when the provider reports it

        Raises:
            ValidationError: If the service has no agent or nothing can be summarized
            SummarizationError: If the prompt is too large or the provider call fails
        """
        if self._llm_agent is None:
            raise ValidationError(
                "Summarization service is not initialized",
                "Configure an API key to enable AI summaries",
            )
        self._validate_record(record)

        prompt = self.build_prompt(record, extra_context)
        estimated = estimate_tokens(prompt)
        if estimated > self._config.max_prompt_tokens:
            raise SummarizationError(
                SummarizationErrorKind.PROMPT_TOO_LARGE,
                f"Prompt too long: {estimated} tokens (max: {self._config.max_prompt_tokens})",
            )

        logger.info(
            "Requesting summary of %s from %s (~%d tokens)",
            record.short_hash,
            self._llm_agent.name,
            estimated,
        )
        response = self._llm_agent.generate(prompt)

        if not response.content:
            raise SummarizationError(
                SummarizationErrorKind.UNKNOWN, "No summary generated: the model returned an empty response"
            )

        return Summary(text=response.content, model=response.model, token_usage=response.token_usage)

    def verify_connection(self) -> bool:
        """
        Send a minimal request to check that the provider answers.

        Returns:
            True if a non-empty text response came back
        """
        if self._llm_agent is None:
            return False

        try:
            response = self._llm_agent.generate(CONNECTION_TEST_PROMPT)
        except SummarizationError as e:
            logger.warning("Connection test failed (%s): %s", e.kind.value, e)
            return False

        success = bool(response.content.strip())
        logger.info("Connection test %s", "successful" if success else "failed")
        return success

    def build_prompt(self, record: CommitRecord, extra_context: str | None = None) -> str:
        """
        Build the summarization prompt of a commit.

        Every changed file is listed for context, but only eligible diffs are
        included.

        Args:
            record: Commit record
            extra_context: Optional additional context

        Returns:
            Prompt text
        """
        max_sentences = self._config.max_sentences
        sentence_word = "sentence" if max_sentences == 1 else "sentences"

        lines = [
            "Please analyze the following git commit and provide a concise summary "
            f"in {max_sentences} {sentence_word} or less.",
            "Focus on the functional impact and purpose of the changes.",
            "",
            f"Commit Message: {record.message}",
            "",
            "File Changes:",
        ]
        for change in record.changes:
            lines.append(f"{change.symbol} {change.path} ({change.kind.value})")
        lines.append("")

        eligible = record.eligible_changes
        if eligible:
            lines.append("Code Changes:")
            for change in eligible:
                lines.append(f"\n--- {change.path} ---")
                lines.append(change.diff or "")

        if extra_context:
            lines.append("")
            lines.append(f"Additional Context: {extra_context}")

        return "\n".join(lines)

    @staticmethod
    def _validate_record(record: CommitRecord) -> None:
        if not record.message or not record.message.strip():
            raise ValidationError("Commit message is required for summarization")
        if not record.changes:
            raise ValidationError("Nothing to summarize: the commit has no file changes")
        if not record.eligible_changes:
            raise ValidationError(
                "Nothing to summarize: no files with diff content are eligible",
                "Check .clogignore patterns or the per-file diff size limit",
            )
