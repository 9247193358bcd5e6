"""Service appending changelog entries to the changelog file."""

import logging
import shutil
import threading
import weakref
from pathlib import Path, PurePath

from changelogger.changelog.domain.errors import ChangelogWriteError, WriteErrorKind
from changelogger.changelog.domain.value_objects import ChangelogStats, ChangelogWriteResult
from changelogger.changelog.services.changelog_renderer import (
    DOCUMENT_HEADER,
    render_block,
    render_entry,
)
from changelogger.git.domain.entities import CommitRecord

logger = logging.getLogger(__name__)

INVALID_PATH_CHARACTERS = frozenset('<>:"|?*')
BACKUP_SUFFIX = ".backup"


def resolve_changelog_path(changelog_path: str | Path, repo_root: Path) -> Path:
    """
    Resolve a configured changelog path against the repository root.

    Args:
        changelog_path: Absolute path, or path relative to the repository root
        repo_root: Root directory of the repository

    Returns:
        Absolute path of the changelog file

    Raises:
        ChangelogWriteError: If the path is empty or contains invalid characters
    """
    raw = str(changelog_path).strip()
    if not raw:
        raise ChangelogWriteError(WriteErrorKind.INVALID_PATH, "Changelog file path is empty")

    drive = PurePath(raw).drive
    invalid = sorted({char for char in raw[len(drive):] if char in INVALID_PATH_CHARACTERS})
    if invalid:
        raise ChangelogWriteError(
            WriteErrorKind.INVALID_PATH,
            f"Changelog path contains invalid characters {''.join(invalid)!r}: {raw}",
        )

    path = Path(raw)
    if not path.is_absolute():
        path = Path(repo_root) / path
    return path.resolve()


class _PathLock:
    """Lock of one changelog path; weak-referenceable so idle paths are dropped."""

    __slots__ = ("_lock", "__weakref__")

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def __enter__(self) -> "_PathLock":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()


class ChangelogWriterService:
    """Service for appending entries to append-only changelog files.

    Appends to the same resolved path are serialized; entries are never
    rewritten or reordered. A path lock lives only while an append holds it.
    """

    def __init__(self, create_backup: bool = True) -> None:
        """
        Initialize ChangelogWriterService.

        Args:
            create_backup: Copy the existing file to ``<file>.backup`` before appending
        """
        self._create_backup = create_backup
        self._locks: weakref.WeakValueDictionary[Path, _PathLock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def append(
        self,
        record: CommitRecord,
        path: Path,
        summary: str | None = None,
        summarization_requested: bool = False,
        summary_note: str | None = None,
    ) -> ChangelogWriteResult:
        """
        Render a commit and append it to the changelog file.

        Args:
            record: Commit to write
            path: Changelog file; relative paths are resolved against the working directory
            summary: Generated summary text, if any
            summarization_requested: Whether the AI summary section is shown
            summary_note: Why no summary is available

        Returns:
            ChangelogWriteResult with the rendered entry and file counts

        Raises:
            ChangelogWriteError: If nothing could be written
        """
        target = resolve_changelog_path(path, Path.cwd())
        entry = render_entry(record, summary, summarization_requested, summary_note)
        block = render_block(entry)

        with self._lock_for(target):
            if target.is_dir():
                raise ChangelogWriteError(
                    WriteErrorKind.INVALID_PATH, f"Changelog path is a directory: {target}"
                )
            self._ensure_directory(target.parent)

            backup_path = None
            if target.exists():
                if self._create_backup:
                    backup_path = self._backup(target)
                self._write(target, block, mode="a")
                created = False
                logger.info("Appended changelog entry for %s to %s", record.short_hash, target)
            else:
                created = self._create(target, block)
                logger.info("Created changelog %s with entry for %s", target, record.short_hash)

        return ChangelogWriteResult(
            path=target,
            entry=entry,
            stats=ChangelogStats.from_record(record, summarization_requested),
            created=created,
            backup_path=backup_path,
        )

    def _lock_for(self, path: Path) -> "_PathLock":
        with self._locks_guard:
            return self._locks.setdefault(path, _PathLock())

    @staticmethod
    def _ensure_directory(directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ChangelogWriteError(
                WriteErrorKind.DIRECTORY_CREATION_FAILED,
                f"Failed to create changelog directory {directory}: {e}",
            ) from e

    def _create(self, target: Path, block: str) -> bool:
        """Create the file with the document header; append if it appeared meanwhile."""
        try:
            self._write(target, DOCUMENT_HEADER + block, mode="x")
            return True
        except FileExistsError:
            self._write(target, block, mode="a")
            return False

    @staticmethod
    def _write(target: Path, content: str, mode: str) -> None:
        try:
            with target.open(mode, encoding="utf-8", newline="") as f:
                f.write(content)
        except FileExistsError:
            raise
        except PermissionError as e:
            raise ChangelogWriteError(
                WriteErrorKind.PERMISSION_DENIED, f"No write permission for {target}: {e}"
            ) from e
        except OSError as e:
            raise ChangelogWriteError(
                WriteErrorKind.IO_FAILURE, f"Failed to write changelog {target}: {e}"
            ) from e

    @staticmethod
    def _backup(target: Path) -> Path | None:
        """Copy the changelog next to itself. Failures are logged, never raised."""
        backup_path = target.with_name(target.name + BACKUP_SUFFIX)
        try:
            shutil.copyfile(target, backup_path)
        except OSError as e:
            logger.warning("Backup of %s failed, appending anyway: %s", target, e)
            return None
        logger.debug("Created backup %s", backup_path)
        return backup_path
