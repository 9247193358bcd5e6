"""Service for `.clogignore` rules deciding which diffs may be summarized."""

import logging
import re
import threading
from collections.abc import Iterable
from pathlib import Path

from changelogger.git.domain.value_objects import IgnorePattern, IgnoreRuleSet

logger = logging.getLogger(__name__)

CLOGIGNORE_FILE = ".clogignore"

# Used when the repository has no .clogignore file
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "*.log",
    "*.tmp",
    "*.temp",
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    "*.min.js",
    "*.min.css",
    "package-lock.json",
    "yarn.lock",
)


def _translate_glob(glob: str) -> str:
    """Translate the glob part of a pattern into a regex fragment.

    ``*`` matches any run of characters, separators included, and ``?``
    matches one character. Bracket expressions are kept as character
    classes; an unterminated one is left as-is so the regex fails to compile.
    """
    parts: list[str] = []
    i = 0
    while i < len(glob):
        char = glob[i]
        if char == "*":
            while i + 1 < len(glob) and glob[i + 1] == "*":
                i += 1
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        elif char == "[":
            end = glob.find("]", i + 2 if glob[i + 1 : i + 2] in ("!", "]") else i + 1)
            if end == -1:
                parts.append("[")
            else:
                body = glob[i + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                parts.append(f"[{body}]")
                i = end
        else:
            parts.append(re.escape(char))
        i += 1
    return "".join(parts)


def compile_pattern(pattern: str) -> IgnorePattern:
    """
    Compile one gitignore-style pattern.

    Args:
        pattern: The pattern, for example ``*.log`` or ``/docs/**``

    Returns:
        The compiled pattern

    Raises:
        re.error: If the pattern cannot be turned into a valid regex
    """
    body = pattern
    anchored = body.startswith("/")
    if anchored:
        body = body[1:]

    if body.endswith("/**"):
        regex = _translate_glob(body[:-3]) + "(/.*)?"
    else:
        regex = _translate_glob(body)

    prefix = "^" if anchored else "(^|/)"
    return IgnorePattern(source=pattern, regex=re.compile(f"{prefix}{regex}$"))


def compile_patterns(patterns: Iterable[str]) -> IgnoreRuleSet:
    """
    Compile patterns into a rule set, skipping the ones that do not compile.

    Args:
        patterns: Pattern lines; blanks and ``#`` comments are dropped

    Returns:
        IgnoreRuleSet with every valid pattern, in input order
    """
    compiled: list[IgnorePattern] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern or pattern.startswith("#"):
            continue
        try:
            compiled.append(compile_pattern(pattern))
        except re.error as e:
            logger.warning("Skipping malformed ignore pattern %r: %s", pattern, e)
    return IgnoreRuleSet(patterns=tuple(compiled))


def is_ignored(file_path: str, ruleset: IgnoreRuleSet) -> bool:
    """
    Check whether a repository-relative path matches any pattern.

    Args:
        file_path: Path relative to the repository root
        ruleset: Compiled ignore rules

    Returns:
        True if at least one pattern matches
    """
    normalized = file_path.replace("\\", "/")
    for pattern in ruleset.patterns:
        if pattern.matches(normalized):
            logger.debug("File %s matches ignore pattern %s", file_path, pattern.source)
            return True
    return False


class IgnoreRulesService:
    """Loads and caches ignore rules per repository root.

    Rule sets are built outside the lock and published by replacing the
    cached reference, so readers always see a complete rule set.
    """

    def __init__(self, default_patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS) -> None:
        self._default_patterns = tuple(default_patterns)
        self._cache: dict[Path, IgnoreRuleSet] = {}
        self._lock = threading.Lock()

    def load(self, repo_root: Path) -> IgnoreRuleSet:
        """
        Get the ignore rules of a repository, reading them on first use.

        Args:
            repo_root: Root directory of the repository

        Returns:
            IgnoreRuleSet from `.clogignore`, or the defaults when it is absent
        """
        key = Path(repo_root).resolve()
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        ruleset = compile_patterns(self._read_patterns(key))
        with self._lock:
            self._cache[key] = ruleset
        return ruleset

    def invalidate(self, repo_root: Path) -> None:
        """Forget the cached rules of a repository."""
        with self._lock:
            self._cache.pop(Path(repo_root).resolve(), None)

    def is_ignored(self, repo_root: Path, file_path: str) -> bool:
        return is_ignored(file_path, self.load(repo_root))

    def _read_patterns(self, repo_root: Path) -> tuple[str, ...]:
        ignore_file = repo_root / CLOGIGNORE_FILE
        if not ignore_file.is_file():
            logger.info("No %s file found in %s, using default patterns", CLOGIGNORE_FILE, repo_root)
            return self._default_patterns

        try:
            lines = ignore_file.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s, using default patterns: %s", ignore_file, e)
            return self._default_patterns

        logger.info("Loaded ignore patterns from %s", ignore_file)
        return tuple(lines)
