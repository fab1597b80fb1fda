"""Filesystem storage backend."""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...models.node import FileNode, FolderNode
from .. import frontmatter_codec, paths
from .base import (
    FOLDER_DOCUMENT,
    AlreadyExistsError,
    AnyNode,
    NotAFileError,
    NotAFolderError,
    NotFoundError,
    StorageBackend,
    build_node,
)

logger = logging.getLogger(__name__)

FILE = "file"
FOLDER = "folder"


def _read_text(path: Path) -> str:
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as handle:
        return handle.read()


def _write_text(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)


class FileSystemStorageBackend(StorageBackend):
    """
    Durable backend mapping ``/a/b`` to ``<base_path>/a/b``.

    A folder's content and metadata live in a hidden ``readme.md`` inside
    the directory. That file never shows up in listings and cannot be
    addressed directly. Each operation runs its blocking filesystem work in
    a worker thread.
    """

    def __init__(self, base_path: str | Path) -> None:
        self.base_path = Path(base_path).expanduser().resolve()

    # Path mapping

    def _physical(self, logical_path: str) -> Path:
        return self.base_path.joinpath(*paths.segments(logical_path))

    def _folder_document(self, logical_path: str) -> Path:
        return self._physical(logical_path) / FOLDER_DOCUMENT

    def _kind(self, logical_path: str) -> Optional[str]:
        """Return 'file', 'folder' or None for the node at ``logical_path``."""
        if paths.leaf_name(logical_path) == FOLDER_DOCUMENT:
            return None
        physical = self._physical(logical_path)
        if physical.is_dir():
            return FOLDER
        if physical.is_file():
            return FILE
        if physical.exists():
            raise NotAFileError(f"Unsupported filesystem entry at path: {logical_path}", logical_path)
        return None

    def _require(self, logical_path: str) -> str:
        kind = self._kind(logical_path)
        if kind is None:
            logger.error(f"Node not found: {logical_path}")
            raise NotFoundError(f"Node not found at path: {logical_path}", logical_path)
        return kind

    def _document_path(self, logical_path: str, kind: str) -> Optional[Path]:
        """Physical file holding the front matter document, if the node has one."""
        if kind == FOLDER:
            return self._folder_document(logical_path)
        if paths.is_markdown(logical_path):
            return self._physical(logical_path)
        return None

    def _read_metadata(self, logical_path: str, kind: str) -> Dict[str, Any]:
        document = self._document_path(logical_path, kind)
        if document is None or not document.is_file():
            return {}
        try:
            text = _read_text(document)
        except OSError as exc:
            logger.warning(f"Failed to read metadata of {logical_path}: {exc}")
            return {}
        return frontmatter_codec.read_metadata(text)

    def _build(self, logical_path: str, kind: str) -> AnyNode:
        return build_node(logical_path, kind == FOLDER, self._read_metadata(logical_path, kind))

    def _ensure_ancestors(self, logical_path: str) -> None:
        for ancestor in paths.ancestor_chain(logical_path):
            kind = self._kind(ancestor)
            if kind == FILE:
                raise NotAFolderError(f"Path points to a file, not a folder: {ancestor}", ancestor)
            if kind is None:
                self._physical(ancestor).mkdir()
                logger.debug(f"Parent folder auto-created: {ancestor}")

    # Blocking implementations

    def _create_file(self, p: str) -> FileNode:
        if self._physical(p).exists():
            logger.warning(f"create_file: already exists: {p}")
            raise AlreadyExistsError(f"File already exists at path: {p}", p)
        self._ensure_ancestors(p)
        try:
            with open(self._physical(p), "x", encoding="utf-8"):
                pass
        except FileExistsError as exc:
            raise AlreadyExistsError(f"File already exists at path: {p}", p) from exc
        logger.debug(f"File created: {p}")
        return FileNode(name=p)

    def _create_folder(self, p: str) -> FolderNode:
        if self._physical(p).exists():
            logger.warning(f"create_folder: already exists: {p}")
            raise AlreadyExistsError(f"Folder already exists at path: {p}", p)
        self._ensure_ancestors(p)
        try:
            self._physical(p).mkdir()
        except FileExistsError as exc:
            raise AlreadyExistsError(f"Folder already exists at path: {p}", p) from exc
        logger.debug(f"Folder created: {p}")
        return FolderNode(name=p)

    def _delete_node(self, p: str) -> None:
        kind = self._require(p)
        physical = self._physical(p)
        if kind == FOLDER:
            shutil.rmtree(physical)
        else:
            physical.unlink()
        logger.debug(f"Node deleted: {p} ({kind})")

    def _rename_node(self, source: str, target: str) -> AnyNode:
        kind = self._require(source)
        if self._physical(target).exists():
            logger.warning(f"rename_node: destination exists: {source} -> {target}")
            raise AlreadyExistsError(f"Node already exists at destination path: {target}", target)
        self._check_move(source, target)
        self._ensure_ancestors(target)
        # A single rename(2) moves the whole subtree, folder document included.
        self._physical(source).rename(self._physical(target))
        logger.debug(f"Node renamed: {source} -> {target}")
        return self._build(target, kind)

    def _read_content(self, p: str) -> str:
        kind = self._require(p)
        if kind == FOLDER:
            document = self._folder_document(p)
            if not document.is_file():
                return ""
            return frontmatter_codec.read_body(_read_text(document))

        raw = _read_text(self._physical(p))
        if paths.is_markdown(p):
            return frontmatter_codec.read_body(raw)
        return raw

    def _write_content(self, p: str, content: str) -> None:
        kind = self._require(p)
        document = self._document_path(p, kind)
        if document is None:
            _write_text(self._physical(p), content)
        else:
            existing = _read_text(document) if document.is_file() else ""
            _write_text(document, frontmatter_codec.replace_body(existing, content))
        logger.debug(f"write_content: {p} ({len(content)} chars)")

    def _write_metadata(self, p: str, metadata: Dict[str, Any]) -> None:
        kind = self._require(p)
        document = self._document_path(p, kind)
        if document is None:
            logger.debug(f"write_metadata: {p} is not a markdown document, ignoring")
            return
        if not document.is_file() and not metadata:
            return
        existing = _read_text(document) if document.is_file() else ""
        _write_text(document, frontmatter_codec.replace_metadata(existing, metadata))
        logger.debug(f"write_metadata: {p} keys={sorted(metadata or {})}")

    def _get_node(self, p: str) -> Optional[AnyNode]:
        kind = self._kind(p)
        if kind is None:
            return None
        return self._build(p, kind)

    def _list_nodes(self, p: str) -> List[AnyNode]:
        kind = self._kind(p)
        if kind is None:
            logger.error(f"list_nodes: folder not found: {p}")
            raise NotFoundError(f"Folder not found at path: {p}", p)
        if kind != FOLDER:
            logger.error(f"list_nodes: not a folder: {p}")
            raise NotAFolderError(f"Path points to a file, not a folder: {p}", p)

        nodes: List[AnyNode] = []
        for entry in sorted(self._physical(p).iterdir(), key=lambda item: item.name):
            if entry.name == FOLDER_DOCUMENT:
                continue
            child = paths.join(p, entry.name)
            if entry.is_dir():
                nodes.append(self._build(child, FOLDER))
            elif entry.is_file():
                nodes.append(self._build(child, FILE))
        return nodes

    # Contract

    async def initialize(self) -> None:
        await asyncio.to_thread(self.base_path.mkdir, parents=True, exist_ok=True)
        logger.debug(f"FileSystemStorageBackend ready at {self.base_path}")

    async def create_file(self, path: str) -> FileNode:
        p = self._clean(path)
        self._check_reserved(p)
        return await asyncio.to_thread(self._create_file, p)

    async def create_folder(self, path: str) -> FolderNode:
        p = self._clean(path)
        self._check_reserved(p)
        return await asyncio.to_thread(self._create_folder, p)

    async def delete_node(self, path: str) -> None:
        p = self._clean(path)
        self._check_mutable(p, "delete")
        await asyncio.to_thread(self._delete_node, p)

    async def rename_node(self, old_path: str, new_path: str) -> AnyNode:
        source = self._clean(old_path)
        target = self._clean(new_path)
        self._check_mutable(source, "rename")
        self._check_reserved(target)
        return await asyncio.to_thread(self._rename_node, source, target)

    async def read_content(self, path: str) -> str:
        return await asyncio.to_thread(self._read_content, self._clean(path))

    async def write_content(self, path: str, content: str) -> None:
        await asyncio.to_thread(self._write_content, self._clean(path), content)

    async def write_metadata(self, path: str, metadata: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._write_metadata, self._clean(path), metadata)

    async def get_node(self, path: str) -> Optional[AnyNode]:
        return await asyncio.to_thread(self._get_node, self._clean(path))

    async def list_nodes(self, path: str) -> List[AnyNode]:
        return await asyncio.to_thread(self._list_nodes, self._clean(path))


__all__ = ["FileSystemStorageBackend"]
