#!/usr/bin/env python3
"""
Script to append a changelog entry for a git commit:
- Repository path
- --commit: Commit hash (optional, defaults to HEAD)
- --mode: base (local only) or ai (adds an AI summary)
- --output: Changelog file (optional, defaults to CHANGELOG.md in the repository)
- --install-hook: Install a post-commit hook running this script after every commit
- --dry-run: Print the entry instead of appending it
"""

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from changelogger.config.settings import Settings
from changelogger.git.services.hook_service import HookService
from changelogger.notifications.repositories.implementations import (
    SlackNotificationRepositoryImpl,
)
from changelogger.notifications.services.notification_service import (
    NotificationService,
)
from changelogger.pipeline.domain.value_objects import PipelineResult
from changelogger.pipeline.services.factory import build_pipeline


def is_git_repository(repo_path: Path) -> bool:
    """Check if the given path is a git working tree (.git may be a file for worktrees)."""
    return (repo_path / ".git").exists()


def validate_repository(repo_path: Path) -> tuple[bool, str]:
    """
    Validate the repository path and return (is_valid, error_message).

    Args:
        repo_path: Path to the git repository

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not repo_path.exists():
        return False, f"Repository path does not exist: {repo_path}"

    if not repo_path.is_dir():
        return False, f"Repository path is not a directory: {repo_path}"

    if not is_git_repository(repo_path):
        return False, f"Path is not a git repository: {repo_path}"

    return True, "Repository is valid"


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply command line options on top of environment settings."""
    overrides: dict = {}
    if args.mode is not None:
        overrides["mode"] = args.mode
    if args.output is not None:
        overrides["changelog_path"] = str(args.output)
    if args.no_backup:
        overrides["create_backup"] = False
    if args.skip_connection_test:
        overrides["verify_connection"] = False
    return dataclasses.replace(settings, **overrides) if overrides else settings


def print_result(result: PipelineResult) -> None:
    """Display the outcome of a changelog run."""
    if not result.success:
        error = result.error
        print(f"✗ Changelog update failed: {error.message if error else 'unknown error'}", file=sys.stderr)
        if error and error.suggestion:
            print(f"  Hint: {error.suggestion}", file=sys.stderr)
        return

    print(f"✓ Changelog entry added for commit {result.commit_hash[:8]}")
    print(f"  File: {result.changelog_path}")
    if result.stats:
        stats = result.stats
        print(
            f"  Files changed: {stats.total_files} "
            f"(added {stats.added_files}, modified {stats.modified_files}, "
            f"deleted {stats.deleted_files})"
        )
    if result.summary_generated:
        print("  AI summary: generated")
        if result.token_usage:
            print(f"  Tokens used: {result.token_usage.total_tokens}")
    if result.summary_error:
        print(f"  ⚠ AI summary unavailable: {result.summary_error.message}")
        if result.summary_error.suggestion:
            print(f"  Hint: {result.summary_error.suggestion}")


def print_preview(result: PipelineResult) -> None:
    """Display the entry a run would append."""
    if not result.success:
        print_result(result)
        return

    print(f"📄 Changelog entry preview for commit {result.commit_hash[:8]} (not written)\n")
    print("=" * 80)
    print(result.changelog_entry)
    print("=" * 80)
    if result.summary_error:
        print(f"  ⚠ AI summary unavailable: {result.summary_error.message}")


def send_to_slack(result: PipelineResult, channel_name: str) -> None:
    """Send the run outcome to Slack, exiting on configuration or API errors."""
    try:
        print(f"\n📤 Sending result to Slack channel #{channel_name}...")

        slack_repo = SlackNotificationRepositoryImpl(token=os.getenv("SLACK_TOKEN"))
        notification_service = NotificationService(slack_repo)
        notification_service.send_result_to_slack(result=result, channel_name=channel_name)

        print(f"✓ Result sent successfully to #{channel_name}!")

    except ValueError as e:
        print(f"\n✗ Configuration error: {e}", file=sys.stderr)
        print("  Hint: Set SLACK_TOKEN in .env file or environment", file=sys.stderr)
        sys.exit(1)
    except RuntimeError as e:
        print(f"\n✗ Error sending to Slack: {e}", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    """Main function to parse arguments and append the changelog entry of a commit."""
    parser = argparse.ArgumentParser(
        description="Append a changelog entry for a git commit, optionally with an AI summary"
    )
    parser.add_argument(
        "repo_path",
        type=Path,
        help="Path to the git repository directory",
    )
    parser.add_argument(
        "--commit",
        type=str,
        default=None,
        help="Hash of the commit to record (default: HEAD)",
    )
    parser.add_argument(
        "--mode",
        choices=("base", "ai"),
        default=None,
        help="base writes local-only entries, ai adds a summary (default: CHANGELOGGER_MODE or base)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Changelog file path (default: CHANGELOG_PATH or CHANGELOG.md)",
    )
    parser.add_argument(
        "--context",
        type=str,
        default=None,
        help="Additional context passed to the summarizer",
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Do not copy the changelog to <file>.backup before appending",
    )
    parser.add_argument(
        "--skip-connection-test",
        action="store_true",
        help="Do not send a test request to the LLM provider before summarizing",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the changelog entry without writing it",
    )
    parser.add_argument(
        "--install-hook",
        action="store_true",
        help="Install a post-commit hook in the repository and exit",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing post-commit hook (with --install-hook)",
    )
    parser.add_argument(
        "--send-to-slack",
        action="store_true",
        help="Send the result to a Slack channel",
    )
    parser.add_argument(
        "--slack-channel",
        type=str,
        help="Slack channel name (required if --send-to-slack is set)",
    )

    args = parser.parse_args()

    if args.send_to_slack and not args.slack_channel:
        print("✗ Error: --slack-channel is required when --send-to-slack is set", file=sys.stderr)
        sys.exit(1)

    is_valid, message = validate_repository(args.repo_path)
    if not is_valid:
        print(f"✗ Validation failed: {message}", file=sys.stderr)
        sys.exit(1)

    if args.install_hook:
        try:
            hook_path = HookService().install_post_commit_hook(args.repo_path, force=args.force)
        except (ValueError, RuntimeError, OSError) as e:
            print(f"✗ Hook installation failed: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"✓ Post-commit hook installed at {hook_path}")
        return

    try:
        settings = apply_overrides(Settings.from_env(), args)
    except ValueError as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    pipeline = build_pipeline(settings)
    if pipeline.degradation_reason:
        print(f"⚠ AI summaries disabled, using base mode: {pipeline.degradation_reason}")

    if args.dry_run:
        result = pipeline.preview_commit(
            args.repo_path.resolve(),
            commit_hash=args.commit,
            extra_context=args.context,
        )
        print_preview(result)
        if not result.success:
            sys.exit(1)
        return

    result = pipeline.process_commit(
        args.repo_path.resolve(),
        commit_hash=args.commit,
        extra_context=args.context,
    )
    print_result(result)

    if args.send_to_slack:
        send_to_slack(result, args.slack_channel)

    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
