"""
End-to-end tests of the changelog pipeline with in-memory git and LLM fakes.

Run with:
    pytest tests/test_changelog_pipeline.py -v
"""

import pytest

from changelogger.changelog.domain.errors import WriteErrorKind
from changelogger.config.settings import Settings
from changelogger.git.domain.errors import AssemblyError
from changelogger.git.domain.value_objects import FileStat
from changelogger.git.services.ignore_rules_service import CLOGIGNORE_FILE
from changelogger.pipeline.services.changelog_pipeline_service import ChangelogPipeline
from changelogger.pipeline.services.factory import build_pipeline, create_summarization_service
from changelogger.summarization.domain.errors import SummarizationError, SummarizationErrorKind

from fakes import FakeGitRepository, FakeLLMAgent, diff_for

STATS = (
    FileStat("login.ts", 25, 0),
    FileStat("app.ts", 4, 2),
    FileStat("temp.js", 0, 9),
)
DIFFS = {
    "login.ts": diff_for("login.ts", added="export function login() {}"),
    "app.ts": diff_for("app.ts", added="import { login } from './login';", removed="// auth later"),
    "temp.js": diff_for("temp.js", added="", removed="scratch"),
}


def base_settings(**overrides):
    values = {"mode": "base", "create_backup": False, "verify_connection": False}
    values.update(overrides)
    return Settings(**values)


def read_changelog(repo):
    return (repo / "CHANGELOG.md").read_text(encoding="utf-8")


class TestBaseMode:
    """Local-only entries."""

    def test_add_login_commit(self, tmp_path):
        repository = FakeGitRepository(stats=STATS, diffs=DIFFS)
        pipeline = build_pipeline(base_settings(), git_repository=repository)

        result = pipeline.process_commit(tmp_path)

        assert result.success
        assert result.commit_hash == repository.commit_hash
        assert result.changelog_path == (tmp_path / "CHANGELOG.md").resolve()
        assert not result.summary_generated
        content = read_changelog(tmp_path)
        assert "## Commit: Add login" in content
        assert "**Added:**\n- + login.ts" in content
        assert "**Modified:**\n- * app.ts" in content
        assert "**Deleted:**\n- - temp.js" in content
        assert "### AI Summary:" not in content
        assert "- Added: 1, Modified: 1, Deleted: 1" in content
        assert "Files processed for AI" not in content
        assert repository.diff_requests == []

    def test_no_commits(self, tmp_path):
        pipeline = build_pipeline(base_settings(), git_repository=FakeGitRepository(has_commits=False))

        result = pipeline.process_commit(tmp_path)

        assert not result.success
        assert isinstance(result.error, AssemblyError)
        assert result.error.message == "No commits found in repository"
        assert not (tmp_path / "CHANGELOG.md").exists()

    def test_write_failure(self, tmp_path):
        (tmp_path / "CHANGELOG.md").mkdir()
        pipeline = build_pipeline(base_settings(), git_repository=FakeGitRepository(stats=STATS))

        result = pipeline.process_commit(tmp_path)

        assert not result.success
        assert result.error.kind == WriteErrorKind.INVALID_PATH

    def test_custom_changelog_path(self, tmp_path):
        settings = base_settings(changelog_path="docs/HISTORY.md")
        pipeline = build_pipeline(settings, git_repository=FakeGitRepository(stats=STATS))

        result = pipeline.process_commit(tmp_path)

        assert result.changelog_path == (tmp_path / "docs" / "HISTORY.md").resolve()
        assert result.changelog_path.exists()


class TestAIMode:
    """Entries with summaries."""

    def test_ignored_file_is_not_sent(self, tmp_path):
        (tmp_path / CLOGIGNORE_FILE).write_text("app.ts\n", encoding="utf-8")
        agent = FakeLLMAgent(content="Adds a login function.")
        pipeline = build_pipeline(
            base_settings(mode="ai", openai_api_key="sk-test"),
            git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS),
            llm_agent=agent,
        )

        result = pipeline.process_commit(tmp_path)

        assert result.success
        assert result.summary_generated
        assert result.token_usage.total_tokens == 132
        assert result.stats.eligible_files == 1
        prompt = agent.prompts[0]
        assert "--- login.ts ---" in prompt
        assert "export function login() {}" in prompt
        assert "--- app.ts ---" not in prompt
        assert "* app.ts (modified)" in prompt
        content = read_changelog(tmp_path)
        assert "### AI Summary:\nAdds a login function." in content
        assert "- Files processed for AI: 1" in content

    def test_extra_context_is_forwarded(self, tmp_path):
        agent = FakeLLMAgent()
        pipeline = build_pipeline(
            base_settings(mode="ai"),
            git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS),
            llm_agent=agent,
        )

        pipeline.process_commit(tmp_path, extra_context="Sprint 12")

        assert agent.prompts[0].endswith("Additional Context: Sprint 12")

    def test_summarization_failure_still_writes_entry(self, tmp_path):
        failure = SummarizationError(SummarizationErrorKind.QUOTA_EXCEEDED, "insufficient_quota")
        pipeline = build_pipeline(
            base_settings(mode="ai"),
            git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS),
            llm_agent=FakeLLMAgent(error=failure),
        )

        result = pipeline.process_commit(tmp_path)

        assert result.success
        assert not result.summary_generated
        assert result.summary_error is failure
        assert result.summary_error.suggestion
        content = read_changelog(tmp_path)
        assert "*AI summary unavailable: insufficient_quota*" in content
        assert "**Added:**\n- + login.ts" in content

    def test_prompt_too_large(self, tmp_path):
        agent = FakeLLMAgent()
        pipeline = build_pipeline(
            base_settings(mode="ai", max_prompt_tokens=20),
            git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS),
            llm_agent=agent,
        )

        result = pipeline.process_commit(tmp_path)

        assert result.success
        assert result.summary_error.kind == SummarizationErrorKind.PROMPT_TOO_LARGE
        assert agent.prompts == []

    def test_nothing_eligible_skips_summarizer(self, tmp_path):
        agent = FakeLLMAgent()
        pipeline = build_pipeline(
            base_settings(mode="ai"),
            git_repository=FakeGitRepository(stats=(FileStat("temp.js", 0, 9),), diffs=DIFFS),
            llm_agent=agent,
        )

        result = pipeline.process_commit(tmp_path)

        assert result.success
        assert agent.prompts == []
        assert result.summary_error is None
        assert "*No files were processed for AI analysis" in read_changelog(tmp_path)

    def test_enabled_without_service_writes_base_entry(self, tmp_path):
        built = build_pipeline(base_settings(), git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS))
        pipeline = ChangelogPipeline(
            built._assembler, built._writer, summarization_service=None, summarization_enabled=True
        )

        result = pipeline.process_commit(tmp_path)

        assert not pipeline.summarization_enabled
        assert result.success
        assert not result.summary_generated
        assert result.summary_error is None
        assert "### AI Summary:" not in read_changelog(tmp_path)


class TestPreview:
    """Entries rendered without touching the changelog."""

    def test_base_mode_preview(self, tmp_path):
        pipeline = build_pipeline(base_settings(), git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS))

        result = pipeline.preview_commit(tmp_path)

        assert result.success
        assert result.changelog_path is None
        assert result.stats.total_files == 3
        assert "## Commit: Add login" in result.changelog_entry
        assert "**Added:**\n- + login.ts" in result.changelog_entry
        assert not (tmp_path / "CHANGELOG.md").exists()

    def test_ai_mode_preview_calls_summarizer(self, tmp_path):
        agent = FakeLLMAgent(content="Adds a login function.")
        pipeline = build_pipeline(
            base_settings(mode="ai"),
            git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS),
            llm_agent=agent,
        )

        result = pipeline.preview_commit(tmp_path, extra_context="Sprint 12")

        assert result.summary_generated
        assert len(agent.prompts) == 1
        assert "### AI Summary:\nAdds a login function." in result.changelog_entry
        assert not (tmp_path / "CHANGELOG.md").exists()

    def test_preview_of_missing_commit(self, tmp_path):
        pipeline = build_pipeline(base_settings(), git_repository=FakeGitRepository(has_commits=False))

        result = pipeline.preview_commit(tmp_path)

        assert not result.success
        assert isinstance(result.error, AssemblyError)
        assert result.changelog_entry is None


class TestFactory:
    """Summarizer creation and degradation to base mode."""

    def test_missing_key_degrades(self, tmp_path):
        pipeline = build_pipeline(
            base_settings(mode="ai", llm_provider="openai"),
            git_repository=FakeGitRepository(stats=STATS, diffs=DIFFS),
        )

        assert not pipeline.summarization_enabled
        assert "OPENAI_API_KEY" in pipeline.degradation_reason

        result = pipeline.process_commit(tmp_path)
        assert result.success
        assert "### AI Summary:" not in read_changelog(tmp_path)

    def test_failed_connection_test_degrades(self):
        settings = base_settings(mode="ai", verify_connection=True)
        failure = SummarizationError(SummarizationErrorKind.AUTHENTICATION_FAILED, "401")

        service, reason = create_summarization_service(settings, FakeLLMAgent(error=failure))

        assert service is None
        assert reason == "Connection test to Fake (test-model) failed"

    def test_successful_connection_test(self):
        settings = base_settings(mode="ai", verify_connection=True, max_sentences=3)

        service, reason = create_summarization_service(settings, FakeLLMAgent(content="OK"))

        assert reason is None
        assert service.config.max_sentences == 3

    @pytest.mark.parametrize("mode", ["base", "ai"])
    def test_summarization_flag(self, mode):
        pipeline = build_pipeline(base_settings(mode=mode), llm_agent=FakeLLMAgent())
        assert pipeline.summarization_enabled is (mode == "ai")
