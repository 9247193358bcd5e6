"""Rendering of commit records into changelog Markdown."""

from changelogger.git.domain.entities import CommitRecord
from changelogger.git.domain.value_objects import ChangeKind

SEPARATOR = "---"
DOCUMENT_HEADER = f"# Changelog\n\nGenerated by Changelogger\n\n{SEPARATOR}\n"
NO_ELIGIBLE_FILES_NOTE = (
    "*No files were processed for AI analysis (all files filtered or too large).*"
)

_SECTION_ORDER = (ChangeKind.ADDED, ChangeKind.MODIFIED, ChangeKind.DELETED)


def format_timestamp(record: CommitRecord) -> str:
    """Format the commit date in the local time zone."""
    return record.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")


def render_entry(
    record: CommitRecord,
    summary: str | None = None,
    summarization_requested: bool = False,
    summary_note: str | None = None,
) -> str:
    """
    Render the changelog entry of a commit.

    Args:
        record: Commit to render
        summary: Generated summary text, if any
        summarization_requested: Whether the AI summary section is shown
        summary_note: Why no summary is available, shown instead of it

    Returns:
        Entry text without the trailing separator
    """
    lines = [
        f"## Commit: {record.message}",
        f"**Author:** {record.author_name} <{record.author_email}>",
        f"**Date:** {format_timestamp(record)}",
        f"**Hash:** `{record.short_hash}`",
        "",
        "### File Changes:",
    ]

    if not record.changes:
        lines.append("- No file changes detected")
        lines.append("")
    else:
        for kind in _SECTION_ORDER:
            changes = record.changes_of_kind(kind)
            if not changes:
                continue
            lines.append(f"**{kind.label}:**")
            lines.extend(f"- {change.symbol} {change.path}" for change in changes)
            lines.append("")

    eligible_count = len(record.eligible_changes)
    if summarization_requested:
        lines.append("### AI Summary:")
        if summary:
            lines.append(summary.strip())
        elif eligible_count == 0:
            lines.append(NO_ELIGIBLE_FILES_NOTE)
        else:
            lines.append(f"*AI summary unavailable: {summary_note or 'no summary was generated'}*")
        lines.append("")

    lines.append("### Statistics:")
    lines.append(f"- Total files changed: {len(record.changes)}")
    lines.append(
        f"- Added: {len(record.added)}, "
        f"Modified: {len(record.modified)}, "
        f"Deleted: {len(record.deleted)}"
    )
    if summarization_requested:
        lines.append(f"- Files processed for AI: {eligible_count}")

    return "\n".join(lines)


def render_block(entry: str) -> str:
    """Wrap an entry into the block appended to the changelog file."""
    return f"\n{entry}\n\n{SEPARATOR}\n"
