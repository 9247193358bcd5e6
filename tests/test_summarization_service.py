"""
Tests for prompt building, limits and provider calls of SummarizationService.

Run with:
    pytest tests/test_summarization_service.py -v
"""

import pytest

from changelogger.errors import ValidationError
from changelogger.git.domain.value_objects import ChangeKind
from changelogger.summarization.domain.errors import SummarizationError, SummarizationErrorKind
from changelogger.summarization.domain.value_objects import SummarizationConfig
from changelogger.summarization.services.summarization_service import (
    CONNECTION_TEST_PROMPT,
    SummarizationService,
    estimate_tokens,
)

from fakes import FakeLLMAgent, diff_for


@pytest.fixture
def login_record(make_record):
    return make_record((
        ("src/login.ts", ChangeKind.ADDED, diff_for("src/login.ts", added="export function login() {}")),
        ("src/app.ts", ChangeKind.MODIFIED, None),
        ("src/temp.js", ChangeKind.DELETED, None),
    ))


@pytest.mark.parametrize("text, expected", [
    ("", 0),
    ("abcd", 1),
    ("abcde", 2),
    ("x" * 400, 100),
])
def test_estimate_tokens(text, expected):
    assert estimate_tokens(text) == expected


class TestBuildPrompt:
    """SummarizationService.build_prompt()."""

    def test_prompt_sections(self, login_record):
        prompt = SummarizationService(FakeLLMAgent()).build_prompt(login_record, "Part of the auth epic")

        assert prompt.startswith(
            "Please analyze the following git commit and provide a concise summary "
            "in 2 sentences or less."
        )
        assert "Focus on the functional impact and purpose of the changes." in prompt
        assert "Commit Message: Add login" in prompt
        assert "+ src/login.ts (added)" in prompt
        assert "* src/app.ts (modified)" in prompt
        assert "- src/temp.js (deleted)" in prompt
        assert "Code Changes:" in prompt
        assert "\n--- src/login.ts ---\n" in prompt
        assert "+export function login() {}" in prompt
        assert "--- src/app.ts ---" not in prompt
        assert prompt.endswith("Additional Context: Part of the auth epic")

    def test_single_sentence(self, login_record):
        service = SummarizationService(FakeLLMAgent(), SummarizationConfig(max_sentences=1))
        assert "in 1 sentence or less." in service.build_prompt(login_record)

    def test_no_context_section_by_default(self, login_record):
        assert "Additional Context" not in SummarizationService(FakeLLMAgent()).build_prompt(login_record)


class TestSummarize:
    """SummarizationService.summarize()."""

    def test_returns_summary(self, login_record):
        agent = FakeLLMAgent(content="Adds a login entry point.")

        summary = SummarizationService(agent).summarize(login_record)

        assert summary.text == "Adds a login entry point."
        assert summary.model == "test-model"
        assert summary.token_usage.total_tokens == 132
        assert len(agent.prompts) == 1
        assert "--- src/login.ts ---" in agent.prompts[0]

    def test_prompt_too_large_makes_no_call(self, make_record):
        record = make_record((
            ("big.py", ChangeKind.ADDED, diff_for("big.py", added="y" * 2000)),
        ))
        agent = FakeLLMAgent()
        service = SummarizationService(agent, SummarizationConfig(max_prompt_tokens=100))

        with pytest.raises(SummarizationError) as exc_info:
            service.summarize(record)

        assert exc_info.value.kind == SummarizationErrorKind.PROMPT_TOO_LARGE
        assert "max: 100" in exc_info.value.message
        assert agent.prompts == []

    def test_nothing_to_summarize(self, make_record):
        record = make_record((
            ("src/temp.js", ChangeKind.DELETED, None),
            ("src/app.ts", ChangeKind.MODIFIED, None),
        ))
        agent = FakeLLMAgent()

        with pytest.raises(ValidationError, match="Nothing to summarize"):
            SummarizationService(agent).summarize(record)
        assert agent.prompts == []

    def test_no_changes(self, make_record):
        with pytest.raises(ValidationError, match="no file changes"):
            SummarizationService(FakeLLMAgent()).summarize(make_record(()))

    def test_empty_message(self, make_record):
        record = make_record((("a.py", ChangeKind.ADDED, "+x"),), message="   ")
        with pytest.raises(ValidationError, match="Commit message is required"):
            SummarizationService(FakeLLMAgent()).summarize(record)

    def test_uninitialized(self, login_record):
        service = SummarizationService(None)
        assert not service.is_initialized
        with pytest.raises(ValidationError, match="not initialized"):
            service.summarize(login_record)

    def test_empty_response(self, login_record):
        with pytest.raises(SummarizationError) as exc_info:
            SummarizationService(FakeLLMAgent(content="")).summarize(login_record)
        assert exc_info.value.kind == SummarizationErrorKind.UNKNOWN

    def test_provider_error_propagates(self, login_record):
        failure = SummarizationError(SummarizationErrorKind.QUOTA_EXCEEDED, "insufficient_quota")
        with pytest.raises(SummarizationError) as exc_info:
            SummarizationService(FakeLLMAgent(error=failure)).summarize(login_record)
        assert exc_info.value is failure


class TestVerifyConnection:
    """SummarizationService.verify_connection()."""

    def test_ok(self):
        agent = FakeLLMAgent(content="OK")
        assert SummarizationService(agent).verify_connection()
        assert agent.prompts == [CONNECTION_TEST_PROMPT]

    def test_empty_answer(self):
        assert not SummarizationService(FakeLLMAgent(content="  ")).verify_connection()

    def test_failure_is_not_raised(self):
        failure = SummarizationError(SummarizationErrorKind.AUTHENTICATION_FAILED, "401")
        assert not SummarizationService(FakeLLMAgent(error=failure)).verify_connection()

    def test_no_agent(self):
        assert not SummarizationService(None).verify_connection()


def test_config_rejects_non_positive_limits():
    with pytest.raises(ValueError):
        SummarizationConfig(max_sentences=0)
    with pytest.raises(ValueError):
        SummarizationConfig(max_prompt_tokens=-1)
