"""Hierarchical node storage with pluggable backends."""

from .base import (
    FOLDER_DOCUMENT,
    AlreadyExistsError,
    AnyNode,
    InvalidPathError,
    NotAFileError,
    NotAFolderError,
    NotFoundError,
    StorageBackend,
    StorageError,
)
from .factory import (
    DEFAULT_SESSION,
    StorageRegistry,
    StorageType,
    create_storage,
    get_storage,
    get_storage_registry,
    reset_storage_registry,
)
from .filesystem import FileSystemStorageBackend
from .memory import MemoryStorageBackend

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
    "MemoryStorageBackend",
    "FileSystemStorageBackend",
    "StorageType",
    "StorageRegistry",
    "DEFAULT_SESSION",
    "create_storage",
    "get_storage",
    "get_storage_registry",
    "reset_storage_registry",
]
