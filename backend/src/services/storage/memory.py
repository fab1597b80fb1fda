"""In-memory storage backend."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ...models.node import FileNode, FolderNode
from .. import frontmatter_codec, paths
from .base import (
    AlreadyExistsError,
    AnyNode,
    NotAFolderError,
    NotFoundError,
    StorageBackend,
    build_node,
)

logger = logging.getLogger(__name__)

FILE = "file"
FOLDER = "folder"


class MemoryStorageBackend(StorageBackend):
    """
    Transient backend keyed by normalized path.

    ``_types`` maps every existing path to ``"file"`` or ``"folder"``.
    ``_documents`` holds the raw text of files and, for folders, the folder
    document (front matter plus body) inline under the folder's own path.
    State lives only as long as the instance.
    """

    def __init__(self) -> None:
        self._types: Dict[str, str] = {paths.ROOT: FOLDER}
        self._documents: Dict[str, str] = {}
        logger.debug("MemoryStorageBackend created")

    # Internal helpers

    def _has_document_layer(self, path: str) -> bool:
        return self._types.get(path) == FOLDER or paths.is_markdown(path)

    def _metadata(self, path: str) -> Dict[str, Any]:
        if not self._has_document_layer(path):
            return {}
        return frontmatter_codec.read_metadata(self._documents.get(path, ""))

    def _node(self, path: str) -> AnyNode:
        return build_node(path, self._types[path] == FOLDER, self._metadata(path))

    def _require(self, path: str) -> str:
        if path not in self._types:
            logger.error(f"Node not found: {path}")
            raise NotFoundError(f"Node not found at path: {path}", path)
        return self._types[path]

    def _missing_ancestors(self, path: str) -> List[str]:
        """Ancestor folders that must be created before ``path`` is inserted."""
        missing = []
        for ancestor in paths.ancestor_chain(path):
            kind = self._types.get(ancestor)
            if kind is None:
                missing.append(ancestor)
            elif kind != FOLDER:
                raise NotAFolderError(f"Path points to a file, not a folder: {ancestor}", ancestor)
        return missing

    def _insert_ancestors(self, missing: List[str]) -> None:
        for ancestor in missing:
            self._types[ancestor] = FOLDER
            logger.debug(f"Parent folder auto-created: {ancestor}")

    def _subtree(self, path: str) -> List[str]:
        return [p for p in self._types if p == path or paths.is_descendant(p, path)]

    # Contract

    async def initialize(self) -> None:
        logger.debug("MemoryStorageBackend.initialize called (noop)")

    async def create_file(self, path: str) -> FileNode:
        p = self._clean(path)
        self._check_reserved(p)
        if p in self._types:
            logger.warning(f"create_file: already exists: {p}")
            raise AlreadyExistsError(f"File already exists at path: {p}", p)

        self._insert_ancestors(self._missing_ancestors(p))
        self._types[p] = FILE
        self._documents[p] = ""
        logger.debug(f"File created: {p}")
        return FileNode(name=p)

    async def create_folder(self, path: str) -> FolderNode:
        p = self._clean(path)
        self._check_reserved(p)
        if p in self._types:
            logger.warning(f"create_folder: already exists: {p}")
            raise AlreadyExistsError(f"Folder already exists at path: {p}", p)

        self._insert_ancestors(self._missing_ancestors(p))
        self._types[p] = FOLDER
        logger.debug(f"Folder created: {p}")
        return FolderNode(name=p)

    async def delete_node(self, path: str) -> None:
        p = self._clean(path)
        self._check_mutable(p, "delete")
        kind = self._require(p)

        doomed = self._subtree(p) if kind == FOLDER else [p]
        for victim in doomed:
            self._types.pop(victim, None)
            self._documents.pop(victim, None)
        logger.debug(f"Node deleted: {p} ({kind}, {len(doomed)} node(s))")

    async def rename_node(self, old_path: str, new_path: str) -> AnyNode:
        source = self._clean(old_path)
        target = self._clean(new_path)
        self._check_mutable(source, "rename")
        self._check_reserved(target)
        self._require(source)
        if target in self._types:
            logger.warning(f"rename_node: destination exists: {source} -> {target}")
            raise AlreadyExistsError(f"Node already exists at destination path: {target}", target)
        self._check_move(source, target)
        missing = self._missing_ancestors(target)

        # Build the relocated entries first, then swap them in with no await
        # in between so no caller sees the subtree under both prefixes.
        moved = self._subtree(source)
        relocated_types = {paths.rebase(p, source, target): self._types[p] for p in moved}
        relocated_documents = {
            paths.rebase(p, source, target): self._documents[p]
            for p in moved
            if p in self._documents
        }

        self._insert_ancestors(missing)
        for p in moved:
            self._types.pop(p, None)
            self._documents.pop(p, None)
        self._types.update(relocated_types)
        self._documents.update(relocated_documents)

        logger.debug(f"Node renamed: {source} -> {target} ({len(moved)} node(s))")
        return self._node(target)

    async def read_content(self, path: str) -> str:
        p = self._clean(path)
        self._require(p)
        raw = self._documents.get(p, "")
        if self._has_document_layer(p):
            content = frontmatter_codec.read_body(raw)
        else:
            content = raw
        logger.debug(f"read_content: {p} ({len(content)} chars)")
        return content

    async def write_content(self, path: str, content: str) -> None:
        p = self._clean(path)
        self._require(p)
        if self._has_document_layer(p):
            existing = self._documents.get(p, "")
            self._documents[p] = frontmatter_codec.replace_body(existing, content)
        else:
            self._documents[p] = content
        logger.debug(f"write_content: {p} ({len(content)} chars)")

    async def write_metadata(self, path: str, metadata: Dict[str, Any]) -> None:
        p = self._clean(path)
        self._require(p)
        if not self._has_document_layer(p):
            logger.debug(f"write_metadata: {p} is not a markdown document, ignoring")
            return
        existing = self._documents.get(p, "")
        self._documents[p] = frontmatter_codec.replace_metadata(existing, metadata)
        logger.debug(f"write_metadata: {p} keys={sorted(metadata or {})}")

    async def get_node(self, path: str) -> Optional[AnyNode]:
        p = self._clean(path)
        if p not in self._types:
            return None
        return self._node(p)

    async def list_nodes(self, path: str) -> List[AnyNode]:
        p = self._clean(path)
        if self._types.get(p) != FOLDER:
            logger.error(f"list_nodes: invalid folder: {p}")
            if p in self._types:
                raise NotAFolderError(f"Path points to a file, not a folder: {p}", p)
            raise NotFoundError(f"Folder not found at path: {p}", p)

        children = [
            candidate
            for candidate in self._types
            if candidate != p and paths.parent_of(candidate) == p
        ]
        return [self._node(child) for child in sorted(children)]

    # Ephemeral-only affordances

    def clear(self) -> None:
        """Drop every node except the root."""
        self._types.clear()
        self._documents.clear()
        self._types[paths.ROOT] = FOLDER
        logger.debug("Storage cleared")

    def all_nodes(self) -> Dict[str, AnyNode]:
        return {path: self._node(path) for path in sorted(self._types)}

    def size(self) -> Dict[str, int]:
        return {
            "node_count": len(self._types),
            "total_content_size": sum(len(text) for text in self._documents.values()),
        }


__all__ = ["MemoryStorageBackend"]
