"""Repository interfaces for LLM summarization operations."""

from abc import ABC, abstractmethod

from changelogger.summarization.domain.value_objects import LLMResponse


class LLMAgentRepository(ABC):
    """Interface for LLM-based text generation."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider and model name."""
        ...

    @abstractmethod
    def generate(self, prompt: str, system_prompt: str | None = None) -> LLMResponse:
        """
        Send a single prompt to the model.

        Args:
            prompt: User prompt
            system_prompt: Optional system instructions; agents use their own when omitted

        Returns:
            The model answer with token usage when available

        Raises:
            SummarizationError: If the provider call fails
        """
        ...
