"""Classification of LLM provider failures into summarization error kinds."""

from collections.abc import Iterator
from typing import Any

from anthropic import APITimeoutError as AnthropicTimeoutError
from openai import APITimeoutError as OpenAITimeoutError

from changelogger.summarization.domain.errors import SummarizationError, SummarizationErrorKind

_TIMEOUT_ERRORS = (TimeoutError, OpenAITimeoutError, AnthropicTimeoutError)

_QUOTA_CODES = frozenset(
    {"insufficient_quota", "billing_hard_limit_reached", "billing_not_active"}
)

# Checked in order, first match wins. Quota comes before rate limiting
# because quota failures are also reported with HTTP 429.
_MESSAGE_RULES: tuple[tuple[SummarizationErrorKind, tuple[str, ...]], ...] = (
    (
        SummarizationErrorKind.QUOTA_EXCEEDED,
        ("insufficient_quota", "quota", "billing", "credit balance"),
    ),
    (
        SummarizationErrorKind.AUTHENTICATION_FAILED,
        ("401", "invalid_api_key", "authentication", "incorrect api key"),
    ),
    (
        SummarizationErrorKind.RATE_LIMITED,
        ("429", "rate_limit", "rate limit", "too many requests"),
    ),
    (
        SummarizationErrorKind.MODEL_ACCESS_DENIED,
        ("403", "404", "permission", "model_not_found", "forbidden", "does not exist"),
    ),
)


def _exception_chain(error: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _error_code(error: BaseException) -> str | None:
    """Extract a provider error code such as ``insufficient_quota``."""
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code

    body: Any = getattr(error, "body", None)
    if isinstance(body, dict):
        nested = body.get("error")
        if isinstance(nested, dict):
            body = nested
        for key in ("code", "type"):
            value = body.get(key)
            if isinstance(value, str):
                return value
    return None


def _classify_structured(error: BaseException) -> SummarizationErrorKind | None:
    status = getattr(error, "status_code", None)
    code = _error_code(error)

    if code in _QUOTA_CODES or status == 402:
        return SummarizationErrorKind.QUOTA_EXCEEDED
    if not isinstance(status, int):
        return None
    if status == 401:
        return SummarizationErrorKind.AUTHENTICATION_FAILED
    if status == 429:
        # Some providers only say "quota" in the message of a 429
        return _classify_message(str(error)) or SummarizationErrorKind.RATE_LIMITED
    if status in (403, 404):
        return SummarizationErrorKind.MODEL_ACCESS_DENIED
    return None


def _classify_message(message: str) -> SummarizationErrorKind | None:
    lowered = message.lower()
    for kind, needles in _MESSAGE_RULES:
        if any(needle in lowered for needle in needles):
            return kind
    return None


def classify_failure_message(message: str) -> SummarizationErrorKind:
    """
    Classify a failure from its message text alone.

    Args:
        message: Error message returned by the provider

    Returns:
        The first matching error kind, UNKNOWN when nothing matches
    """
    return _classify_message(message) or SummarizationErrorKind.UNKNOWN


def classify_llm_failure(error: BaseException) -> SummarizationError:
    """
    Turn an exception raised while calling a model into a SummarizationError.

    Timeouts are detected by type. Structured HTTP status codes and provider
    error codes are preferred; message substrings are the fallback.

    Args:
        error: Exception raised by the LLM client

    Returns:
        SummarizationError carrying the detected kind and the raw message
    """
    if isinstance(error, SummarizationError):
        return error

    message = str(error) or type(error).__name__
    chain = list(_exception_chain(error))

    if any(isinstance(item, _TIMEOUT_ERRORS) for item in chain):
        return SummarizationError(
            SummarizationErrorKind.TIMEOUT, f"Summarization request timed out: {message}"
        )

    for item in chain:
        kind = _classify_structured(item)
        if kind is not None:
            return SummarizationError(kind, message)

    return SummarizationError(classify_failure_message(message), message)
