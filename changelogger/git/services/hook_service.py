"""Service installing the git hook that triggers changelog generation."""

import stat
import subprocess
from pathlib import Path

HOOK_MARKER = "# installed by changelogger"

_HOOK_TEMPLATE = """#!/bin/sh
{marker}
# Appends an entry for the commit that was just created.
changelogger "$(git rev-parse --show-toplevel)" --commit "$(git rev-parse HEAD)" || true
"""


class HookService:
    """Service for installing the post-commit hook."""

    def install_post_commit_hook(self, repo_path: Path, force: bool = False) -> Path:
        """
        Install a post-commit hook passing the new commit hash to the CLI.

        Args:
            repo_path: Path to the git repository
            force: Overwrite an existing hook not installed by changelogger

        Returns:
            Path of the installed hook

        Raises:
            ValueError: If a foreign hook exists and force is False
            RuntimeError: If the hooks directory cannot be located
        """
        hook_path = self._hooks_dir(repo_path) / "post-commit"

        if hook_path.exists() and not force:
            existing = hook_path.read_text(encoding="utf-8", errors="replace")
            if HOOK_MARKER not in existing:
                raise ValueError(
                    f"A post-commit hook already exists at {hook_path}. "
                    "Remove it or install with --force."
                )

        hook_path.parent.mkdir(parents=True, exist_ok=True)
        hook_path.write_text(_HOOK_TEMPLATE.format(marker=HOOK_MARKER), encoding="utf-8")
        mode = hook_path.stat().st_mode
        hook_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return hook_path

    @staticmethod
    def _hooks_dir(repo_path: Path) -> Path:
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--git-path", "hooks"],
                cwd=repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise RuntimeError(
                f"Failed to locate git hooks directory: {(e.stderr or str(e)).strip()}"
            ) from e

        hooks_dir = Path(result.stdout.strip())
        if not hooks_dir.is_absolute():
            hooks_dir = Path(repo_path) / hooks_dir
        return hooks_dir
