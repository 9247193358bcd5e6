"""Slack delivery of changelog notifications."""

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from changelogger.notifications.domain.value_objects import ChangelogNotification, SlackChannel

# Slack rejects section blocks longer than 3000 characters
MAX_BLOCK_SIZE = 2900

_SLACK_ERRORS = {
    "channel_not_found": "Channel '{channel}' not found. Make sure the bot is invited to the channel.",
    "not_in_channel": "Bot is not a member of channel '{channel}'. Invite the bot to the channel first.",
    "invalid_auth": "Invalid Slack token. Check SLACK_TOKEN.",
}


def split_into_blocks(text: str, max_size: int = MAX_BLOCK_SIZE) -> list[str]:
    """Split text on line boundaries into chunks of at most ``max_size`` characters."""
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > max_size:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:max_size])
            line = line[max_size:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > max_size:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


class SlackNotificationRepositoryImpl:
    """Posts changelog notifications with the Slack SDK."""

    def __init__(self, token: str | None, client: WebClient | None = None) -> None:
        """Initialize the Slack client with token.

        Args:
            token: The Slack Bot User OAuth Token
            client: Pre-built client, mainly for tests

        Raises:
            ValueError: If token is empty or None
        """
        if not token:
            raise ValueError(
                "SLACK_TOKEN environment variable is required. "
                "Get your token from https://api.slack.com/apps"
            )
        self._client = client or WebClient(token=token)

    def send(self, channel: SlackChannel, notification: ChangelogNotification) -> bool:
        """Post a notification to a channel.

        Args:
            channel: Target channel
            notification: Message to post

        Returns:
            True if Slack acknowledged the message

        Raises:
            RuntimeError: If the Slack API call fails
        """
        blocks: list[dict] = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": notification.title, "emoji": True},
            }
        ]
        blocks.extend(
            {"type": "section", "text": {"type": "mrkdwn", "text": chunk}}
            for chunk in split_into_blocks(notification.text)
        )

        try:
            response = self._client.chat_postMessage(
                channel=channel.name,
                blocks=blocks,
                text=notification.title,
            )
        except SlackApiError as e:
            error_code = e.response.get("error", "unknown error")
            template = _SLACK_ERRORS.get(error_code, "Slack API error: {error}")
            raise RuntimeError(template.format(channel=channel.name, error=error_code)) from e
        except Exception as e:
            raise RuntimeError(f"Failed to send Slack message: {e}") from e

        return bool(response.get("ok", False))
