"""Factory for creating LLM agent instances."""

from changelogger.config.settings import Settings
from changelogger.summarization.repositories.implementations import (
    LangChainClaudeAgent,
    LangChainOpenAIAgent,
)
from changelogger.summarization.repositories.interfaces import LLMAgentRepository


def create_llm_agent(settings: Settings) -> LLMAgentRepository:
    """
    Create an LLM agent instance based on configuration.

    Args:
        settings: Settings naming the provider, model, credential and timeout

    Returns:
        LLM agent instance (OpenAI or Claude)

    Raises:
        ValueError: If the provider is invalid or its API key is missing
    """
    provider = settings.llm_provider

    if provider == "openai" or provider == "gpt":
        return LangChainOpenAIAgent(
            api_key=settings.openai_api_key,
            model_name=settings.openai_model,
            timeout_seconds=settings.timeout_seconds,
        )
    elif provider == "anthropic" or provider == "claude":
        return LangChainClaudeAgent(
            api_key=settings.anthropic_api_key,
            model_name=settings.anthropic_model,
            timeout_seconds=settings.timeout_seconds,
        )
    else:
        raise ValueError(
            f"Invalid LLM_PROVIDER: {provider}. "
            "Supported values: 'openai', 'gpt', 'anthropic', 'claude'"
        )
