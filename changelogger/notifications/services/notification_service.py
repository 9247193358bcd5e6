"""Service for orchestrating notification sending."""

from changelogger.notifications.domain.value_objects import ChangelogNotification, SlackChannel
from changelogger.notifications.repositories.implementations import (
    SlackNotificationRepositoryImpl,
)
from changelogger.pipeline.domain.value_objects import PipelineResult


def build_notification(result: PipelineResult) -> ChangelogNotification:
    """
    Describe a pipeline result as a notification.

    Args:
        result: Outcome of one changelog run

    Returns:
        ChangelogNotification with counts, summary status or the failure
    """
    short_hash = (result.commit_hash or "unknown")[:8]

    if not result.success:
        lines = [f"*Error:* {result.error.message if result.error else 'unknown error'}"]
        if result.error and result.error.suggestion:
            lines.append(f"*Suggested action:* {result.error.suggestion}")
        return ChangelogNotification(
            title=f"Changelog entry failed for {short_hash}", lines=tuple(lines), is_error=True
        )

    lines = []
    if result.stats:
        stats = result.stats
        lines.append(
            f"Files: {stats.total_files} ({stats.added_files} added, "
            f"{stats.modified_files} modified, {stats.deleted_files} deleted)"
        )
        if stats.eligible_files is not None:
            lines.append(f"AI processed: {stats.eligible_files}")
    if result.summary_generated:
        usage = f" ({result.token_usage.total_tokens} tokens)" if result.token_usage else ""
        lines.append(f"AI summary generated{usage}")
    if result.summary_error:
        lines.append(f"AI summary unavailable: {result.summary_error}")
    if result.changelog_path:
        lines.append(f"Written to `{result.changelog_path}`")

    return ChangelogNotification(
        title=f"Changelog entry added for {short_hash}",
        lines=tuple(lines) or ("Changelog entry written",),
    )


class NotificationService:
    """Service for orchestrating notification operations."""

    def __init__(self, slack_repository: SlackNotificationRepositoryImpl) -> None:
        """Initialize the notification service.

        Args:
            slack_repository: Repository for sending Slack notifications
        """
        self._slack_repository = slack_repository

    def send_result_to_slack(self, result: PipelineResult, channel_name: str) -> None:
        """Send the outcome of a changelog run to a Slack channel.

        Args:
            result: Outcome of the run
            channel_name: The name of the Slack channel (without # prefix)

        Raises:
            ValueError: If the channel name is invalid
            RuntimeError: If there's an error sending the message to Slack
        """
        channel = SlackChannel(name=channel_name)
        notification = build_notification(result)

        if not self._slack_repository.send(channel, notification):
            raise RuntimeError("Failed to send message to Slack (API returned failure)")
