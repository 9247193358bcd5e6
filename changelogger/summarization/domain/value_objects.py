"""Value objects for Summarization domain."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SummarizationConfig:
    """Limits applied to summarization requests."""

    max_sentences: int = 2
    max_prompt_tokens: int = 8000

    def __post_init__(self) -> None:
        if self.max_sentences <= 0:
            raise ValueError("max_sentences must be a positive integer")
        if self.max_prompt_tokens <= 0:
            raise ValueError("max_prompt_tokens must be a positive integer")


@dataclass(frozen=True)
class TokenUsage:
    """Token counters reported by the model provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class LLMResponse:
    """Raw text answer of an LLM agent."""

    content: str
    model: str = ""
    token_usage: TokenUsage | None = None


@dataclass(frozen=True)
class Summary:
    """Natural-language summary of a commit."""

    text: str
    model: str = ""
    token_usage: TokenUsage | None = None
