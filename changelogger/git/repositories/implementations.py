"""Concrete implementation of Git repository operations."""

import subprocess
from datetime import datetime
from pathlib import Path

from changelogger.git.domain.errors import GitCommandError
from changelogger.git.domain.value_objects import CommitInfo, FileStat
from changelogger.git.repositories.interfaces import GitRepository

_FIELD_SEPARATOR = "\x1f"


class GitRepositoryImpl(GitRepository):
    """Concrete implementation of Git repository operations using git commands."""

    def get_commit_info(self, repo_path: Path, commit_ref: str = "HEAD") -> CommitInfo | None:
        """
        Get the metadata of a commit.

        Args:
            repo_path: Path to the git repository
            commit_ref: Commit hash or revision, HEAD by default

        Returns:
            CommitInfo, or None if the revision does not name a commit
        """
        resolved = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{commit_ref}^{{commit}}"],
            cwd=repo_path,
            capture_output=True,
            text=True,
            check=False,
        )
        commit_hash = resolved.stdout.strip()
        if resolved.returncode != 0 or not commit_hash:
            return None

        output = self._run(
            repo_path,
            "log",
            "-1",
            f"--format=%H{_FIELD_SEPARATOR}%an{_FIELD_SEPARATOR}%ae{_FIELD_SEPARATOR}%aI{_FIELD_SEPARATOR}%s",
            commit_hash,
        )
        parts = output.rstrip("\n").split(_FIELD_SEPARATOR, 4)
        if len(parts) != 5:
            raise GitCommandError(f"Invalid commit format: {output!r}")

        full_hash, author_name, author_email, date_str, message = parts
        return CommitInfo(
            hash=full_hash,
            message=message,
            author_name=author_name,
            author_email=author_email,
            date=datetime.fromisoformat(date_str),
        )

    def list_file_stats(self, repo_path: Path, commit_hash: str) -> tuple[FileStat, ...]:
        """
        List per-file insertion and deletion counts of a commit.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit

        Returns:
            Tuple of FileStat in the order git lists them
        """
        parent = self._parent_of(repo_path, commit_hash)
        output = self._run(
            repo_path, "diff", "--numstat", "--no-renames", "-z", parent, commit_hash
        )

        stats: list[FileStat] = []
        for entry in output.split("\0"):
            if not entry.strip():
                continue
            parts = entry.split("\t", 2)
            if len(parts) != 3:
                continue
            insertions, deletions, file_path = parts
            stats.append(
                FileStat(
                    path=file_path,
                    insertions=None if insertions == "-" else int(insertions),
                    deletions=None if deletions == "-" else int(deletions),
                )
            )
        return tuple(stats)

    def get_file_diff(self, repo_path: Path, commit_hash: str, file_path: str) -> str:
        """
        Get the unified diff of a single file between a commit and its parent.

        Args:
            repo_path: Path to the git repository
            commit_hash: Hash of the commit
            file_path: Path to the file relative to repository root

        Returns:
            Raw unified diff, possibly empty
        """
        parent = self._parent_of(repo_path, commit_hash)
        return self._run(
            repo_path, "diff", "--no-renames", "--no-color", parent, commit_hash, "--", file_path
        )

    def _parent_of(self, repo_path: Path, commit_hash: str) -> str:
        """Return the first parent of a commit, or the empty tree for a root commit."""
        output = self._run(repo_path, "rev-list", "--parents", "-n", "1", commit_hash)
        hashes = output.split()
        if len(hashes) > 1:
            return hashes[1]
        return self._run(repo_path, "hash-object", "-t", "tree", "--stdin", stdin="").strip()

    @staticmethod
    def _run(repo_path: Path, *args: str, stdin: str | None = None) -> str:
        """Run a git command in the repository and return its stdout."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=repo_path,
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=True,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitCommandError(
                f"Git command failed: git {' '.join(args)}: {(e.stderr or str(e)).strip()}"
            ) from e
        except FileNotFoundError as e:
            raise GitCommandError("Git is not installed or not in PATH") from e
