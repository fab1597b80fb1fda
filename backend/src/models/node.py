"""Storage node Pydantic models."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

NodeMetadata = Dict[str, Any]


class _BaseNode(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "/chats/001-first-chat.md",
                "type": "file",
                "metadata": {"title": "First chat"},
            }
        }
    )

    name: str = Field(..., min_length=1, description="Absolute, normalized logical path")
    metadata: Optional[NodeMetadata] = Field(
        None, description="Front matter; absent when empty"
    )

    @field_validator("metadata", mode="after")
    @classmethod
    def _drop_empty_metadata(cls, value: Optional[NodeMetadata]) -> Optional[NodeMetadata]:
        return value or None

    @model_serializer(mode="wrap")
    def _omit_absent_metadata(self, handler):
        data = handler(self)
        if isinstance(data, dict) and data.get("metadata") is None:
            data.pop("metadata", None)
        return data


class FileNode(_BaseNode):
    """A file in the storage tree."""

    type: Literal["file"] = "file"


class FolderNode(_BaseNode):
    """A folder in the storage tree."""

    type: Literal["folder"] = "folder"


Node = Annotated[Union[FileNode, FolderNode], Field(discriminator="type")]


class NodeCreate(BaseModel):
    """Request payload to create a file or folder."""

    path: Optional[str] = None
    type: Optional[str] = None
    metadata: Optional[NodeMetadata] = None


class NodeMove(BaseModel):
    """Request payload to move or rename a node."""

    model_config = ConfigDict(populate_by_name=True)

    old_path: Optional[str] = Field(None, alias="oldPath")
    new_path: Optional[str] = Field(None, alias="newPath")


class ContentWrite(BaseModel):
    """Request payload to overwrite a node's body."""

    path: Optional[str] = None
    content: Optional[str] = None


class MetadataWrite(BaseModel):
    """Request payload to write a node's metadata."""

    path: Optional[str] = None
    metadata: Optional[NodeMetadata] = None
    append: bool = False


class NodeResponse(BaseModel):
    node: Node


class NodeListResponse(BaseModel):
    nodes: List[Node]
    breadcrumbs: List[Node]


class ContentResponse(BaseModel):
    content: str


class SuccessResponse(BaseModel):
    success: bool = True


class MetadataResponse(BaseModel):
    success: bool = True
    node: Optional[Node] = None


__all__ = [
    "NodeMetadata",
    "FileNode",
    "FolderNode",
    "Node",
    "NodeCreate",
    "NodeMove",
    "ContentWrite",
    "MetadataWrite",
    "NodeResponse",
    "NodeListResponse",
    "ContentResponse",
    "SuccessResponse",
    "MetadataResponse",
]
