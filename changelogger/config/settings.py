"""Settings loaded from the environment and `.env` files."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

VALID_MODES = ("base", "ai")
VALID_PROVIDERS = ("openai", "gpt", "anthropic", "claude")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env_file(env_file: Path | None = None) -> None:
    """Load environment variables from a .env file."""
    if env_file is not None:
        load_dotenv(env_file)
        return

    # Try to find .env file in project root (parent of changelogger package)
    project_root = Path(__file__).parent.parent.parent
    project_env = project_root / ".env"
    if project_env.exists():
        load_dotenv(project_env)
    else:
        # Fallback: try current directory
        load_dotenv()


def _get_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return value


def _get_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got '{raw}'")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration of the changelog pipeline."""

    mode: str = "base"
    changelog_path: str = "CHANGELOG.md"
    max_sentences: int = 2
    max_prompt_tokens: int = 8000
    max_file_diff_bytes: int = 50_000
    timeout_seconds: int = 30
    create_backup: bool = True
    verify_connection: bool = True
    llm_provider: str = "openai"
    openai_api_key: str | None = None
    openai_model: str | None = None
    anthropic_api_key: str | None = None
    anthropic_model: str | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.mode not in VALID_MODES:
            raise ValueError(
                f"Invalid CHANGELOGGER_MODE: {self.mode}. Supported values: 'base', 'ai'"
            )
        if self.llm_provider not in VALID_PROVIDERS:
            raise ValueError(
                f"Invalid LLM_PROVIDER: {self.llm_provider}. "
                "Supported values: 'openai', 'gpt', 'anthropic', 'claude'"
            )

    @property
    def summarization_enabled(self) -> bool:
        return self.mode == "ai"

    @property
    def api_key(self) -> str | None:
        """Credential of the configured provider."""
        if self.llm_provider in ("anthropic", "claude"):
            return self.anthropic_api_key
        return self.openai_api_key

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        env_file: Path | None = None,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ; no .env file is loaded then
            env_file: Explicit .env file to load before reading os.environ

        Returns:
            Settings with defaults for every unset variable

        Raises:
            ValueError: If a variable has an invalid value
        """
        if environ is None:
            load_env_file(env_file)
            environ = os.environ

        return cls(
            mode=environ.get("CHANGELOGGER_MODE", "base").strip().lower() or "base",
            changelog_path=environ.get("CHANGELOG_PATH", "").strip() or "CHANGELOG.md",
            max_sentences=_get_int(environ, "CHANGELOGGER_MAX_SENTENCES", 2),
            max_prompt_tokens=_get_int(environ, "CHANGELOGGER_MAX_PROMPT_TOKENS", 8000),
            max_file_diff_bytes=_get_int(environ, "CHANGELOGGER_MAX_FILE_DIFF_BYTES", 50_000),
            timeout_seconds=_get_int(environ, "CHANGELOGGER_TIMEOUT", 30),
            create_backup=_get_bool(environ, "CHANGELOGGER_BACKUP", True),
            verify_connection=_get_bool(environ, "CHANGELOGGER_VERIFY_CONNECTION", True),
            llm_provider=environ.get("LLM_PROVIDER", "openai").strip().lower() or "openai",
            openai_api_key=environ.get("OPENAI_API_KEY") or None,
            openai_model=environ.get("OPENAI_MODEL") or None,
            anthropic_api_key=environ.get("ANTHROPIC_API_KEY") or None,
            anthropic_model=environ.get("ANTHROPIC_MODEL") or None,
            log_level=environ.get("CHANGELOGGER_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        )
