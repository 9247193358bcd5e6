"""Value objects for the notifications domain."""

import re
from dataclasses import dataclass

_CHANNEL_NAME = re.compile(r"^[a-z0-9_-]{1,80}$")


@dataclass(frozen=True)
class SlackChannel:
    """Slack channel receiving changelog notifications, named without ``#``."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Channel name cannot be empty")
        if self.name.startswith("#"):
            raise ValueError(f"Channel name should not include the # prefix, use '{self.name[1:]}'")
        if not _CHANNEL_NAME.match(self.name):
            raise ValueError(
                f"Invalid channel name '{self.name}'. Use lowercase letters, "
                "numbers, hyphens and underscores"
            )


@dataclass(frozen=True)
class ChangelogNotification:
    """Message describing the outcome of one changelog run.

    Attributes:
        title: Header line of the message
        lines: Markdown body lines
        is_error: Whether the run failed
    """

    title: str
    lines: tuple[str, ...]
    is_error: bool = False

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Notification title cannot be empty")
        if not self.lines:
            raise ValueError("Notification body cannot be empty")

    @property
    def text(self) -> str:
        return "\n".join(self.lines)
