"""Helpers for splitting slash-delimited storage paths.

Paths are always relative to the configured root. Leading and trailing
separators, as well as empty components (``a//b``), are ignored.
"""

from __future__ import annotations

SEPARATOR = "/"


def is_blank(path: str | None) -> bool:
    return path is None or path.strip() == ""


def looks_like_folder(path: str | None) -> bool:
    """Return True when the path ends with a separator."""
    return path is not None and path.strip().endswith(SEPARATOR)


def folder_segments(path: str | None) -> list[str]:
    """Return every non-empty component of a folder-valued path.

    Args:
        path: A path such as ``"docs/notes"`` or ``"/docs/notes/"``.

    Returns:
        The ordered list of folder names, empty for a blank path.
    """
    if is_blank(path):
        return []
    return [part for part in path.strip().split(SEPARATOR) if part]


def split_path(path: str | None) -> tuple[list[str], str]:
    """Split a file-valued path into its folder prefix and leaf name.

    ``"docs/notes/hello.txt"`` gives ``(["docs", "notes"], "hello.txt")``,
    ``"hello.txt"`` gives ``([], "hello.txt")`` and a blank path gives
    ``([], "")``.
    """
    segments = folder_segments(path)
    if not segments:
        return [], ""
    return segments[:-1], segments[-1]
