"""Pydantic models for data validation and serialization."""

from .message import ChatMessage, MessagePart, MessagesResponse, MessagesWrite
from .node import (
    ContentResponse,
    ContentWrite,
    FileNode,
    FolderNode,
    MetadataResponse,
    MetadataWrite,
    Node,
    NodeCreate,
    NodeListResponse,
    NodeMetadata,
    NodeMove,
    NodeResponse,
    SuccessResponse,
)

__all__ = [
    "FileNode",
    "FolderNode",
    "Node",
    "NodeMetadata",
    "NodeCreate",
    "NodeMove",
    "ContentWrite",
    "MetadataWrite",
    "NodeResponse",
    "NodeListResponse",
    "ContentResponse",
    "SuccessResponse",
    "MetadataResponse",
    "ChatMessage",
    "MessagePart",
    "MessagesWrite",
    "MessagesResponse",
]
