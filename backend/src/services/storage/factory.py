"""Backend selection and the per-session backend cache."""

from __future__ import annotations

import asyncio
from enum import Enum
import logging
from typing import Dict, Optional

from ..config import AppConfig, get_config
from .base import StorageBackend
from .filesystem import FileSystemStorageBackend
from .memory import MemoryStorageBackend

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"


class StorageType(str, Enum):
    MEMORY = "memory"
    FILESYSTEM = "filesystem"


async def create_storage(
    storage_type: StorageType | str | None = None,
    config: AppConfig | None = None,
) -> StorageBackend:
    """
    Build and initialize one backend.

    The type comes from ``storage_type`` when given, otherwise from
    ``config.storage_type``. Raises ValueError for unknown types.
    """
    config = config or get_config()
    raw_type = storage_type if storage_type is not None else config.storage_type
    try:
        kind = StorageType(raw_type)
    except ValueError as exc:
        raise ValueError(f"Unknown storage type: {raw_type}") from exc

    backend: StorageBackend
    if kind is StorageType.MEMORY:
        logger.info("Using memory storage backend")
        backend = MemoryStorageBackend()
    else:
        logger.info(f"Using filesystem storage backend at {config.data_store_path}")
        backend = FileSystemStorageBackend(config.data_store_path)

    await backend.initialize()
    return backend


class StorageRegistry:
    """
    Process-wide map of session id to backend instance.

    Backends are created lazily on first access. The ``default`` session
    uses the configured backend type; any other session id isolates a test
    run and always gets a fresh memory backend.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config
        self._backends: Dict[str, StorageBackend] = {}
        self._lock = asyncio.Lock()

    @property
    def config(self) -> AppConfig:
        return self._config or get_config()

    async def get(self, session_id: str = DEFAULT_SESSION) -> StorageBackend:
        """Return the session's backend, creating it on first use."""
        backend = self._backends.get(session_id)
        if backend is not None:
            return backend

        async with self._lock:
            backend = self._backends.get(session_id)
            if backend is None:
                storage_type = None if session_id == DEFAULT_SESSION else StorageType.MEMORY
                backend = await create_storage(storage_type, self.config)
                self._backends[session_id] = backend
                logger.debug(f"[{session_id}] storage created")
            return backend

    def clear(self, session_id: str) -> None:
        """Drop the cached backend of one session."""
        if self._backends.pop(session_id, None) is not None:
            logger.debug(f"[{session_id}] storage dropped")

    def reset(self) -> None:
        """Drop every cached backend."""
        self._backends.clear()

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._backends

    def __len__(self) -> int:
        return len(self._backends)


_storage_registry: StorageRegistry | None = None


def get_storage_registry() -> StorageRegistry:
    """Get or create the storage registry singleton."""
    global _storage_registry
    if _storage_registry is None:
        _storage_registry = StorageRegistry()
    return _storage_registry


def reset_storage_registry() -> None:
    """Discard the registry singleton and all of its backends."""
    global _storage_registry
    if _storage_registry is not None:
        _storage_registry.reset()
    _storage_registry = None


async def get_storage(session_id: Optional[str] = None) -> StorageBackend:
    return await get_storage_registry().get(session_id or DEFAULT_SESSION)


__all__ = [
    "DEFAULT_SESSION",
    "StorageType",
    "create_storage",
    "StorageRegistry",
    "get_storage_registry",
    "reset_storage_registry",
    "get_storage",
]
