"""Derive numbered, slugged node names from titles."""

from __future__ import annotations

import re

from . import paths

MAX_SLUG_LENGTH = 100
_LEADING_NUMBER = re.compile(r"^\s*(\d+)")


def slugify(title: str) -> str:
    slug = title.lower()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    return (slug or "untitled")[:MAX_SLUG_LENGTH]


def generate_file_name(n: int, title: str) -> str:
    """``generate_file_name(7, "Hello World") == "007-hello-world"``."""
    return f"{n:03d}-{slugify(title)}"


def change_file_name(path: str, title: str) -> str:
    """
    Rename the leaf of ``path`` after ``title``, keeping its leading number.

    A leaf without a leading number counts as 0. Markdown leaves keep their
    ``.md`` suffix. An empty title leaves the path untouched.
    """
    if not title:
        return path
    old_name = paths.leaf_name(path)
    if not old_name:
        return path

    match = _LEADING_NUMBER.match(old_name)
    number = int(match.group(1)) if match else 0
    new_name = generate_file_name(number, title)
    if old_name.endswith(".md"):
        new_name += ".md"
    return paths.join(paths.parent_of(path), new_name)


__all__ = ["slugify", "generate_file_name", "change_file_name"]
