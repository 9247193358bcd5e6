"""Classification of file changes from diff statistics."""

from changelogger.git.domain.value_objects import ChangeKind, FileStat


def classify_change(insertions: int | None, deletions: int | None) -> ChangeKind:
    """
    Classify a file change from its line counts.

    Only insertions means the file was added, only deletions means it was
    deleted. Everything else, binary files included, is a modification.

    Args:
        insertions: Number of inserted lines, None for binary files
        deletions: Number of deleted lines, None for binary files

    Returns:
        The change kind of the file
    """
    if insertions is None or deletions is None:
        return ChangeKind.MODIFIED
    if insertions > 0 and deletions == 0:
        return ChangeKind.ADDED
    if insertions == 0 and deletions > 0:
        return ChangeKind.DELETED
    return ChangeKind.MODIFIED


def classify_file_stat(stat: FileStat) -> ChangeKind:
    return classify_change(stat.insertions, stat.deletions)
