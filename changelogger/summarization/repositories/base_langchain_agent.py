"""Base class for LangChain-based LLM agents."""

import logging
from abc import ABC
from typing import TYPE_CHECKING, Any

from langchain_core.messages import HumanMessage, SystemMessage

from changelogger.summarization.domain.value_objects import LLMResponse, TokenUsage
from changelogger.summarization.repositories.interfaces import LLMAgentRepository
from changelogger.summarization.services.error_classifier import classify_llm_failure

if TYPE_CHECKING:
    from langchain_core.language_models.chat_models import BaseChatModel

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that summarizes code changes in a clear, concise "
    "manner. Focus on the functional impact and purpose of the changes."
)


class BaseLangChainAgent(LLMAgentRepository, ABC):
    """Base class for LangChain-based commit summarization agents."""

    def __init__(self, model_name: str) -> None:
        """Initialize the base agent with common configuration.

        Args:
            model_name: Name of the model used by the subclass chat model
        """
        self._model_name = model_name
        self._system_prompt = SYSTEM_PROMPT
        self._llm: BaseChatModel  # Set by subclasses

    @property
    def model_name(self) -> str:
        return self._model_name

    def generate(self, prompt: str, system_prompt: str | None = None) -> LLMResponse:
        """
        Send a prompt to the chat model.

        Args:
            prompt: User prompt
            system_prompt: Optional system instructions overriding the default

        Returns:
            The model answer with token usage when reported

        Raises:
            SummarizationError: If the LLM API call fails
        """
        messages = [
            SystemMessage(content=system_prompt or self._system_prompt),
            HumanMessage(content=prompt),
        ]

        try:
            response = self._llm.invoke(messages)
        except Exception as e:
            error = classify_llm_failure(e)
            logger.warning("%s request failed (%s): %s", self.name, error.kind.value, error.message)
            raise error from e

        return LLMResponse(
            content=self._extract_text(response.content).strip(),
            model=self._model_name,
            token_usage=self._extract_usage(getattr(response, "usage_metadata", None)),
        )

    @staticmethod
    def _extract_text(content: Any) -> str:
        """Flatten the different content shapes returned by chat models."""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return " ".join(
                item if isinstance(item, str) else str(item.get("text", ""))
                for item in content
            )
        return str(content)

    @staticmethod
    def _extract_usage(usage: Any) -> TokenUsage | None:
        if not usage:
            return None
        prompt_tokens = int(usage.get("input_tokens", 0) or 0)
        completion_tokens = int(usage.get("output_tokens", 0) or 0)
        total_tokens = int(usage.get("total_tokens", 0) or prompt_tokens + completion_tokens)
        return TokenUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
        )
