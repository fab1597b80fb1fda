"""Storage backend contract and error taxonomy."""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Optional

from ...models.node import FileNode, FolderNode, NodeMetadata
from .. import paths

# Hidden document that carries a folder's content and metadata.
FOLDER_DOCUMENT = "readme.md"

AnyNode = FileNode | FolderNode


class StorageError(Exception):
    """Base error for storage operations."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class NotFoundError(StorageError):
    """The target node does not exist."""


class NotAFolderError(NotFoundError):
    """The path exists but is a file where a folder is required."""


class NotAFileError(StorageError):
    """The path exists but is a folder where a file is required."""


class AlreadyExistsError(StorageError):
    """Create or rename destination is already occupied."""


class InvalidPathError(StorageError):
    """The path cannot be used for this operation."""


class StorageBackend(abc.ABC):
    """
    Hierarchical store of files and folders addressed by logical paths.

    Every method accepts paths with or without a leading '/'; they are
    normalized before use. Markdown files ('.md', '.markdown') and folders
    carry metadata in a YAML front matter header; other files are plain text.
    """

    @abc.abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend for use."""

    @abc.abstractmethod
    async def create_file(self, path: str) -> FileNode:
        """Create an empty file, auto-creating missing ancestor folders."""

    @abc.abstractmethod
    async def create_folder(self, path: str) -> FolderNode:
        """Create a folder, auto-creating missing ancestor folders."""

    @abc.abstractmethod
    async def delete_node(self, path: str) -> None:
        """Delete a file, or a folder with everything below it."""

    @abc.abstractmethod
    async def rename_node(self, old_path: str, new_path: str) -> AnyNode:
        """Move a node and its whole subtree to ``new_path``."""

    @abc.abstractmethod
    async def read_content(self, path: str) -> str:
        """Return the body of a node, without front matter."""

    @abc.abstractmethod
    async def write_content(self, path: str, content: str) -> None:
        """Replace the body of a node, keeping its front matter."""

    @abc.abstractmethod
    async def write_metadata(self, path: str, metadata: Dict[str, Any]) -> None:
        """Replace the metadata of a node wholesale. Empty metadata removes it."""

    @abc.abstractmethod
    async def get_node(self, path: str) -> Optional[AnyNode]:
        """Return the node at ``path`` or None."""

    @abc.abstractmethod
    async def list_nodes(self, path: str) -> List[AnyNode]:
        """Return the immediate children of a folder, sorted by name."""

    # Shared path checks

    @staticmethod
    def _clean(path: str) -> str:
        if paths.has_parent_reference(path or ""):
            raise InvalidPathError(f"Path must not contain '.' or '..' segments: {path}", path)
        return paths.normalize(path)

    @staticmethod
    def _check_mutable(path: str, action: str) -> None:
        if path == paths.ROOT:
            raise InvalidPathError(f"Cannot {action} the root folder", path)

    @staticmethod
    def _check_reserved(path: str) -> None:
        if paths.leaf_name(path) == FOLDER_DOCUMENT:
            raise InvalidPathError(f"'{FOLDER_DOCUMENT}' is reserved for folder documents: {path}", path)

    @staticmethod
    def _check_move(old_path: str, new_path: str) -> None:
        if paths.is_descendant(new_path, old_path):
            raise InvalidPathError(
                f"Cannot move {old_path} into its own subtree: {new_path}", new_path
            )


def build_node(path: str, is_folder: bool, metadata: Optional[NodeMetadata] = None) -> AnyNode:
    if is_folder:
        return FolderNode(name=path, metadata=metadata or None)
    return FileNode(name=path, metadata=metadata or None)


__all__ = [
    "FOLDER_DOCUMENT",
    "AnyNode",
    "StorageBackend",
    "StorageError",
    "NotFoundError",
    "NotAFolderError",
    "NotAFileError",
    "AlreadyExistsError",
    "InvalidPathError",
    "build_node",
]
