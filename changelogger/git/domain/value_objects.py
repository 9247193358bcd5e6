"""Value objects for Git domain."""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ChangeKind(str, Enum):
    """Kind of change applied to a file by a commit."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"

    @property
    def symbol(self) -> str:
        """Glyph used for this kind in the changelog listing."""
        return _SYMBOLS[self]

    @property
    def label(self) -> str:
        """Section title used for this kind in the changelog."""
        return self.value.capitalize()


_SYMBOLS = {
    ChangeKind.ADDED: "+",
    ChangeKind.MODIFIED: "*",
    ChangeKind.DELETED: "-",
}


@dataclass(frozen=True)
class FileStat:
    """Line statistics reported by git for one file of a commit.

    Binary files have no line counts, so both counters are None.
    """

    path: str
    insertions: int | None
    deletions: int | None


@dataclass(frozen=True)
class CommitInfo:
    """Information about a commit."""

    hash: str
    message: str
    author_name: str
    author_email: str
    date: datetime


@dataclass(frozen=True)
class IgnorePattern:
    """A single compiled `.clogignore` pattern."""

    source: str
    regex: re.Pattern[str]

    def matches(self, file_path: str) -> bool:
        return self.regex.search(file_path) is not None


@dataclass(frozen=True)
class IgnoreRuleSet:
    """Compiled ignore patterns; a path matching any of them is ignored."""

    patterns: tuple[IgnorePattern, ...] = ()

    def __len__(self) -> int:
        return len(self.patterns)

    @property
    def sources(self) -> tuple[str, ...]:
        return tuple(pattern.source for pattern in self.patterns)
