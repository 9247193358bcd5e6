"""Concrete implementations of LLM summarization using LangChain."""

from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI

from changelogger.summarization.repositories.base_langchain_agent import (
    BaseLangChainAgent,
)

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 500


class LangChainOpenAIAgent(BaseLangChainAgent):
    """LangChain implementation using OpenAI for commit summarization."""

    DEFAULT_MODEL = "gpt-3.5-turbo"

    def __init__(
        self,
        api_key: str | None,
        model_name: str | None = None,
        timeout_seconds: float = 30.0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        """
        Initialize the OpenAI agent.

        Args:
            api_key: OpenAI API key
            model_name: Optional model name override. Defaults to gpt-3.5-turbo
            timeout_seconds: Request timeout
            max_tokens: Upper bound on the length of the answer

        Raises:
            ValueError: If the API key is missing
        """
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is required. "
                "Please set it in a .env file or as an environment variable."
            )

        model = model_name or self.DEFAULT_MODEL
        super().__init__(model)

        self._llm = ChatOpenAI(  # type: ignore[call-arg]
            model=model,
            api_key=api_key,
            temperature=DEFAULT_TEMPERATURE,
            max_tokens=max_tokens,
            timeout=timeout_seconds,
            max_retries=0,
        )

    @property
    def name(self) -> str:
        return f"OpenAI ({self.model_name})"


class LangChainClaudeAgent(BaseLangChainAgent):
    """LangChain implementation using Claude for commit summarization."""

    DEFAULT_MODEL = "claude-3-5-sonnet-20241022"

    def __init__(
        self,
        api_key: str | None,
        model_name: str | None = None,
        timeout_seconds: float = 30.0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        """
        Initialize the Claude agent.

        Args:
            api_key: Anthropic API key
            model_name: Optional model name override. Defaults to claude-3-5-sonnet-20241022
            timeout_seconds: Request timeout
            max_tokens: Upper bound on the length of the answer

        Raises:
            ValueError: If the API key is missing
        """
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable is required. "
                "Please set it in a .env file or as an environment variable."
            )

        model = model_name or self.DEFAULT_MODEL
        super().__init__(model)

        self._llm = ChatAnthropic(  # type: ignore[call-arg]
            model=model,
            api_key=api_key,
            temperature=DEFAULT_TEMPERATURE,
            max_tokens=max_tokens,
            timeout=timeout_seconds,
            max_retries=0,
        )

    @property
    def name(self) -> str:
        return f"Claude ({self.model_name})"
