"""Logical path helpers shared by the storage backends.

All storage paths are absolute, '/'-separated strings. The root is '/'.
"""

from __future__ import annotations

from typing import List

ROOT = "/"
MARKDOWN_SUFFIXES = (".md", ".markdown")


def normalize(path: str) -> str:
    """Ensure a leading '/', collapse repeated slashes, strip the trailing '/'."""
    if not path:
        return ROOT
    if not path.startswith("/"):
        path = "/" + path
    while "//" in path:
        path = path.replace("//", "/")
    if path != ROOT and path.endswith("/"):
        path = path[:-1]
    return path


def parent_of(path: str) -> str:
    """Return the parent path. The root is its own parent."""
    normalized = normalize(path)
    if normalized == ROOT:
        return ROOT
    index = normalized.rfind("/")
    return ROOT if index == 0 else normalized[:index]


def leaf_name(path: str) -> str:
    """Return the last segment of a path ('' for the root)."""
    normalized = normalize(path)
    if normalized == ROOT:
        return ""
    return normalized.rsplit("/", 1)[-1]


def join(parent: str, name: str) -> str:
    """Join a folder path and a child name."""
    parent = normalize(parent)
    name = name.strip("/")
    if parent == ROOT:
        return normalize(name)
    return f"{parent}/{name}" if name else parent


def segments(path: str) -> List[str]:
    return [part for part in normalize(path).split("/") if part]


def ancestor_chain(path: str, include_self: bool = False) -> List[str]:
    """
    Return the root followed by every prefix of ``path``.

    The path itself is included only when ``include_self`` is set. Used for
    breadcrumb trails; callers drop entries that do not exist.
    """
    parts = segments(path)
    if not parts:
        return [ROOT] if include_self and path in ("/", "") else []
    count = len(parts) if include_self else len(parts) - 1
    return [ROOT] + ["/" + "/".join(parts[: index + 1]) for index in range(count)]


def is_markdown(path: str) -> bool:
    return leaf_name(path).endswith(MARKDOWN_SUFFIXES)


def is_descendant(path: str, ancestor: str) -> bool:
    """True when ``path`` lies strictly below ``ancestor``."""
    path = normalize(path)
    ancestor = normalize(ancestor)
    if path == ancestor:
        return False
    if ancestor == ROOT:
        return True
    return path.startswith(ancestor + "/")


def rebase(path: str, old_prefix: str, new_prefix: str) -> str:
    """Replace ``old_prefix`` at the start of ``path`` with ``new_prefix``."""
    path = normalize(path)
    old_prefix = normalize(old_prefix)
    new_prefix = normalize(new_prefix)
    if path == old_prefix:
        return new_prefix
    if not is_descendant(path, old_prefix):
        raise ValueError(f"{path} is not inside {old_prefix}")
    suffix = path[len(old_prefix):] if old_prefix != ROOT else path
    return normalize(new_prefix + suffix)


def has_parent_reference(path: str) -> bool:
    """True when any segment is '..' or '.'."""
    return any(part in ("..", ".") for part in path.replace("\\", "/").split("/"))


__all__ = [
    "ROOT",
    "MARKDOWN_SUFFIXES",
    "normalize",
    "parent_of",
    "leaf_name",
    "join",
    "segments",
    "ancestor_chain",
    "is_markdown",
    "is_descendant",
    "rebase",
    "has_parent_reference",
]
