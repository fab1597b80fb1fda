"""Service layer: storage engine, codecs and folder summaries."""

from .config import AppConfig, get_config, reload_config
from .folder_summary import folder_summary, messages_summary, update_folder_summary
from .message_codec import count_code_blocks, markdown_to_messages, messages_to_markdown
from .storage import (
    AlreadyExistsError,
    FileSystemStorageBackend,
    InvalidPathError,
    MemoryStorageBackend,
    NotAFileError,
    NotAFolderError,
    NotFoundError,
    StorageBackend,
    StorageError,
    StorageRegistry,
    StorageType,
    create_storage,
    get_storage,
    get_storage_registry,
)

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
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
    "create_storage",
    "get_storage",
    "get_storage_registry",
    "folder_summary",
    "update_folder_summary",
    "messages_summary",
    "messages_to_markdown",
    "markdown_to_messages",
    "count_code_blocks",
]
