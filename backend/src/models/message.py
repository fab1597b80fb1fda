"""Chat message Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessagePart(BaseModel):
    """
    One part of a chat message.

    ``text`` and ``reasoning`` parts carry ``text``. Tool parts
    (``dynamic-tool`` or ``tool-*``) keep their remaining fields as extras.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1)
    text: Optional[str] = None

    @property
    def is_tool(self) -> bool:
        return self.type == "dynamic-tool" or self.type.startswith("tool-")


class ChatMessage(BaseModel):
    """A single chat turn."""

    id: str = ""
    role: str = Field("user", description="user, assistant or system")
    parts: List[MessagePart] = Field(default_factory=list)


class MessagesWrite(BaseModel):
    """Request payload to store a conversation."""

    path: Optional[str] = None
    messages: Optional[List[ChatMessage]] = None


class MessagesResponse(BaseModel):
    messages: List[ChatMessage]


__all__ = ["MessagePart", "ChatMessage", "MessagesWrite", "MessagesResponse"]
