"""Depth-first walk over a remote directory tree."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

from ..errors import ListingError
from ..models import DirectoryEntry

logger = logging.getLogger(__name__)

ListDir = Callable[[str], list[DirectoryEntry]]
OnError = Callable[[str, ListingError], None]


def join_path(parent: str, name: str) -> str:
    """Repo-relative child path. Root is the empty string."""
    return f"{parent.rstrip('/')}/{name}" if parent else name


def is_marker_name(name: str, marker: str) -> bool:
    """Repository gate: file name contains marker, any case."""
    return marker.lower() in name.lower()


def is_project_file(name: str, extension: str) -> bool:
    """Extraction: file name ends with extension, any case."""
    return name.lower().endswith(extension.lower())


def _list(list_dir: ListDir, path: str, on_error: Optional[OnError]) -> Iterator[DirectoryEntry]:
    try:
        entries = list_dir(path)
    except ListingError as e:
        if on_error is not None:
            on_error(path, e)
        else:
            logger.debug("Listing failed for %r, skipping subtree: %s", path or "/", e)
        return iter(())
    return iter(entries)


def walk_tree(list_dir: ListDir, root: str = "", on_error: Optional[OnError] = None) -> Iterator[DirectoryEntry]:
    """
    Yield every file entry under root, lazily.

    Same order as a recursive walk: siblings in listing order, each directory
    fully visited before the next sibling. A directory is listed only when the
    walk reaches it, so stopping early saves the remaining requests. A failed
    listing skips that subtree only.
    """
    stack = [(root, _list(list_dir, root, on_error))]
    while stack:
        path, entries = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue
        if entry.is_dir:
            child = entry.path or join_path(path, entry.name)
            stack.append((child, _list(list_dir, child, on_error)))
        elif entry.is_file:
            yield entry


def contains_marker_file(list_dir: ListDir, root: str = "", marker: str = "csproj") -> bool:
    """True iff some file under root has marker in its name. First match wins."""
    return any(is_marker_name(e.name, marker) for e in walk_tree(list_dir, root))
