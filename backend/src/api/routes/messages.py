"""HTTP API routes for conversations stored as markdown documents."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ...models.message import MessagesResponse, MessagesWrite
from ...services.folder_summary import update_folder_summary
from ...services.message_codec import markdown_to_messages, messages_to_markdown
from .storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/storage/messages", response_model=MessagesResponse)
async def read_messages(
    storage: Storage,
    path: Optional[str] = Query(None, description="Logical path of the conversation"),
) -> MessagesResponse:
    """Decode the conversation stored at ``path``."""
    if not path:
        raise HTTPException(status_code=400, detail="Path parameter is required")

    try:
        content = await storage.read_content(path)
    except Exception as exc:
        logger.warning(f"Failed to read messages at {path}: {exc}")
        raise HTTPException(status_code=500, detail=str(exc) or "Failed to read messages")
    return MessagesResponse(messages=markdown_to_messages(content))


@router.post("/api/storage/messages")
async def write_messages(write: MessagesWrite, storage: Storage) -> dict:
    """Encode ``messages`` into the document body and refresh the folder index."""
    if not write.path or write.messages is None:
        raise HTTPException(status_code=400, detail="Path and messages are required")

    try:
        await storage.write_content(write.path, messages_to_markdown(write.messages))
        await update_folder_summary(storage, write.path)
    except Exception as exc:
        logger.warning(f"Failed to write messages at {write.path}: {exc}")
        raise HTTPException(status_code=500, detail=str(exc) or "Failed to write messages")
    return {"ok": True}


__all__ = ["router"]
