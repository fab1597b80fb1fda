"""HTTP API routes for storage node operations."""

from __future__ import annotations

import logging
from typing import Annotated, Any, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ...models.node import (
    ContentResponse,
    ContentWrite,
    MetadataResponse,
    MetadataWrite,
    NodeCreate,
    NodeListResponse,
    NodeMove,
    NodeResponse,
    SuccessResponse,
)
from ...services import paths
from ...services.folder_summary import update_folder_summary
from ...services.storage import MemoryStorageBackend, StorageBackend, get_storage_registry
from ..middleware.session import get_session_id, get_session_storage

logger = logging.getLogger(__name__)

router = APIRouter()

Storage = Annotated[StorageBackend, Depends(get_session_storage)]


def _bad_request(message: str) -> NoReturn:
    raise HTTPException(status_code=400, detail=message)


def _failed(exc: Exception, fallback: str) -> HTTPException:
    logger.warning(f"{fallback}: {exc}")
    return HTTPException(status_code=500, detail=str(exc) or fallback)


@router.get("/api/storage")
async def get_or_list(
    storage: Storage,
    path: Optional[str] = Query(None, description="Logical path of the node"),
    action: Optional[str] = Query(None, description="'get' (default) or 'list'"),
) -> Any:
    """Fetch a single node, or list a folder with its breadcrumb trail."""
    if not path:
        _bad_request("Path parameter is required")

    try:
        if action == "list":
            nodes = await storage.list_nodes(path)
            breadcrumbs = []
            for ancestor in paths.ancestor_chain(paths.normalize(path), include_self=True):
                crumb = await storage.get_node(ancestor)
                if crumb is not None:
                    breadcrumbs.append(crumb)
            return NodeListResponse(nodes=nodes, breadcrumbs=breadcrumbs)

        node = await storage.get_node(path)
    except Exception as exc:
        raise _failed(exc, "Failed to get node")

    if node is None:
        raise HTTPException(status_code=404, detail="Node not found")
    return NodeResponse(node=node)


@router.post("/api/storage", response_model=NodeResponse, status_code=201)
async def create_node(create: NodeCreate, storage: Storage) -> NodeResponse:
    """Create a file or folder, optionally with initial metadata."""
    if not create.path or not create.type:
        _bad_request("Path and type are required")
    if create.type not in ("file", "folder"):
        _bad_request('Type must be either "file" or "folder"')

    try:
        if create.type == "file":
            node = await storage.create_file(create.path)
        else:
            node = await storage.create_folder(create.path)

        if create.metadata:
            await storage.write_metadata(node.name, create.metadata)
            node = await storage.get_node(node.name) or node
    except Exception as exc:
        raise _failed(exc, "Failed to create node")

    return NodeResponse(node=node)


@router.delete("/api/storage", response_model=SuccessResponse)
async def delete_node(
    storage: Storage,
    path: Optional[str] = Query(None, description="Logical path of the node"),
) -> SuccessResponse:
    """Delete a node and everything below it."""
    if not path:
        _bad_request("Path parameter is required")

    try:
        await storage.delete_node(path)
    except Exception as exc:
        raise _failed(exc, "Failed to delete node")
    return SuccessResponse()


@router.patch("/api/storage", response_model=NodeResponse)
async def move_node(move: NodeMove, storage: Storage) -> NodeResponse:
    """Move or rename a node with its whole subtree."""
    if not move.old_path or not move.new_path:
        _bad_request("oldPath and newPath are required")

    try:
        node = await storage.rename_node(move.old_path, move.new_path)
    except Exception as exc:
        raise _failed(exc, "Failed to rename node")
    return NodeResponse(node=node)


@router.get("/api/storage/content", response_model=ContentResponse)
async def read_content(
    storage: Storage,
    path: Optional[str] = Query(None, description="Logical path of the node"),
) -> ContentResponse:
    """Read a node's body."""
    if not path:
        _bad_request("Path parameter is required")

    try:
        content = await storage.read_content(path)
    except Exception as exc:
        raise _failed(exc, "Failed to read content")
    return ContentResponse(content=content)


@router.put("/api/storage/content", response_model=SuccessResponse)
async def write_content(write: ContentWrite, storage: Storage) -> SuccessResponse:
    """Overwrite a node's body, keeping its metadata."""
    if not write.path or write.content is None:
        _bad_request("Path and content are required")

    try:
        await storage.write_content(write.path, write.content)
    except Exception as exc:
        raise _failed(exc, "Failed to write content")
    return SuccessResponse()


@router.put("/api/storage/metadata", response_model=MetadataResponse)
async def write_metadata(write: MetadataWrite, storage: Storage) -> MetadataResponse:
    """Replace, or with ``append`` shallow-merge, a node's metadata."""
    if not write.path or write.metadata is None:
        _bad_request("Path and metadata are required")

    try:
        metadata = write.metadata
        if write.append:
            current = await storage.get_node(write.path)
            metadata = {**((current.metadata if current else None) or {}), **metadata}
        await storage.write_metadata(write.path, metadata)

        node = await storage.get_node(write.path)
        await update_folder_summary(storage, write.path)
    except Exception as exc:
        raise _failed(exc, "Failed to write metadata")
    return MetadataResponse(node=node)


@router.post("/api/storage/clear")
async def clear_storage(storage: Storage) -> dict:
    """Empty the session's in-memory backend."""
    if not isinstance(storage, MemoryStorageBackend):
        _bad_request("Only the memory storage backend can be cleared")
    storage.clear()
    return {"ok": True}


@router.delete("/api/test-cleanup")
async def drop_session(session_id: Annotated[str, Depends(get_session_id)]) -> dict:
    """Forget the session's cached backend."""
    get_storage_registry().clear(session_id)
    return {"ok": True}


__all__ = ["router"]
