"""Generate a folder's index document from its children."""

from __future__ import annotations

import logging
from typing import List, Optional

from . import paths
from .file_name import change_file_name
from .message_codec import count_code_blocks, markdown_to_messages
from .storage.base import AnyNode, NotAFolderError, StorageBackend, StorageError

logger = logging.getLogger(__name__)


def _plural(n: int, word: str) -> str:
    return f"1 {word}" if n == 1 else f"{n} {word}s"


def _title(node: AnyNode) -> str:
    title = (node.metadata or {}).get("title")
    return str(title) if title else node.name


def messages_summary(content: str) -> str:
    """One-line digest of a stored conversation: questions asked and code blocks answered."""
    messages = markdown_to_messages(content)
    questions = sum(1 for message in messages if message.role == "user")
    code_blocks = sum(
        count_code_blocks(part.text or "")
        for message in messages
        if message.role == "assistant"
        for part in message.parts
        if part.type == "text"
    )

    digest = [_plural(questions, "question")]
    if code_blocks > 0:
        digest.append(_plural(code_blocks, "code block"))
    return "; ".join(digest)


async def folder_summary(storage: StorageBackend, path: str) -> Optional[str]:
    """
    Build the index document of a folder.

    Returns None when ``path`` does not exist and raises NotAFolderError
    when it is a file.
    """
    node = await storage.get_node(path)
    if node is None:
        return None
    if node.type != "folder":
        raise NotAFolderError(f"Path {node.name} is not a folder", node.name)

    children = await storage.list_nodes(node.name)
    folders = [child for child in children if child.type == "folder"]
    files = [child for child in children if child.type == "file"]

    markdown: List[str] = [f"# {_title(node)}", "", "## Table of content", ""]

    for child in files:
        markdown.append(f"1. [{_title(child)}](./{paths.leaf_name(child.name)})")
        # Only markdown files hold conversations; other files get no digest.
        if paths.is_markdown(child.name):
            digest = messages_summary(await storage.read_content(child.name))
            if digest:
                markdown.append(f"   > {digest}")

    markdown.append("---")

    for child in folders:
        markdown.append(f"1. [{_title(child)}](./{paths.leaf_name(child.name)}/)")

    return "\n".join(markdown)


async def _rename_after_title(storage: StorageBackend, child: AnyNode) -> AnyNode:
    title = (child.metadata or {}).get("title")
    if not title:
        return child
    new_name = change_file_name(child.name, str(title))
    if new_name == child.name:
        return child
    try:
        return await storage.rename_node(child.name, new_name)
    except StorageError as exc:
        logger.warning(f"Failed to rename {child.name} -> {new_name}: {exc}")
        return child


async def _update_node_summary(
    storage: StorageBackend, node: AnyNode, recursive: bool, rename: bool
) -> None:
    folder_path = paths.parent_of(node.name) if node.type == "file" else node.name

    if recursive:
        for child in await storage.list_nodes(folder_path):
            if rename:
                child = await _rename_after_title(storage, child)
            if child.type == "folder":
                await _update_node_summary(storage, child, recursive, rename)

    summary = await folder_summary(storage, folder_path)
    if summary:
        await storage.write_content(folder_path, summary)
        logger.debug(f"Folder summary updated: {folder_path}")


async def update_folder_summary(
    storage: StorageBackend, path: str, recursive: bool = False, rename: bool = False
) -> None:
    """
    Rewrite the index document of ``path`` (or of its parent, for a file).

    With ``recursive`` every subfolder is refreshed first; with ``rename``
    children whose ``title`` metadata implies a different name are renamed.
    Missing paths are ignored.
    """
    node = await storage.get_node(path)
    if node is None:
        return
    await _update_node_summary(storage, node, recursive, rename)


__all__ = ["folder_summary", "update_folder_summary", "messages_summary"]
