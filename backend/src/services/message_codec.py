"""Convert between stored conversation markdown and structured chat messages."""

from __future__ import annotations

import json
import logging
import re
import uuid
from typing import Iterable, List, Optional

from pydantic import ValidationError

from ..models.message import ChatMessage, MessagePart

logger = logging.getLogger(__name__)

MESSAGE_DELIMITER = "--- message ---"
TOOL_MARKER = "***tool***"
THINK_OPEN = "<think>"
THINK_CLOSE = "</think>"
ROLE_PATTERN = re.compile(r"^role:\s*(.+)$")
FENCED_CODE_BLOCK = re.compile(r"(^|\n)([`~]{3,})[^\n]*\n[\s\S]*?\n\2(?=$|\n)")


def _part_lines(part: MessagePart) -> Optional[List[str]]:
    if part.is_tool:
        payload = part.model_dump(exclude_none=True)
        return [TOOL_MARKER, "```json", json.dumps(payload, indent=2), "```"]
    if part.type == "reasoning":
        return [THINK_OPEN, part.text or "", THINK_CLOSE]
    if part.text is not None:
        return [part.text]
    logger.debug(f"Unsupported message part type: {part.type}")
    return None


def message_to_markdown(message: ChatMessage) -> str:
    lines: List[str] = []
    for part in message.parts:
        rendered = _part_lines(part)
        if rendered is not None:
            lines.extend(rendered)
    return "\n".join([MESSAGE_DELIMITER, f"role: {message.role}", "---", "\n".join(lines)])


def messages_to_markdown(messages: Iterable[ChatMessage]) -> str:
    """Render a conversation as markdown, one delimited block per message."""
    return "\n\n".join(message_to_markdown(message) for message in messages)


class _MessageParser:
    """Line-oriented parser for a single delimited message block."""

    def __init__(self) -> None:
        self.role: Optional[str] = None
        self.parts: List[MessagePart] = []
        self.text: List[str] = []
        self.reasoning: List[str] = []
        self.tool_json: List[str] = []
        self.in_think = False
        self.in_tool = False
        self.collecting_tool = False

    def flush_text(self) -> None:
        if self.text:
            self.parts.append(MessagePart(type="text", text="\n".join(self.text)))
            self.text = []

    def flush_reasoning(self) -> None:
        if self.reasoning:
            self.parts.append(MessagePart(type="reasoning", text="\n".join(self.reasoning)))
            self.reasoning = []

    def flush_tool(self) -> None:
        if not self.tool_json:
            return
        raw = "\n".join(self.tool_json)
        self.tool_json = []
        try:
            self.parts.append(MessagePart.model_validate(json.loads(raw)))
        except (json.JSONDecodeError, ValidationError):
            self.parts.append(MessagePart(type="text", text=raw))

    def feed(self, line: str) -> None:
        if self.role is None:
            match = ROLE_PATTERN.match(line)
            if match:
                self.role = match.group(1).strip()
                return

        if line == "---":
            return

        stripped = line.strip()
        if stripped == TOOL_MARKER:
            self.flush_text()
            self.flush_reasoning()
            self.in_tool = True
            return

        if self.in_tool and stripped.startswith("```"):
            self.collecting_tool = not self.collecting_tool
            if not self.collecting_tool:
                self.flush_tool()
                self.in_tool = False
            return

        if self.collecting_tool:
            self.tool_json.append(line)
            return

        if THINK_OPEN in line:
            self.flush_text()
            self.in_think = True
            after = line.replace(THINK_OPEN, "").strip()
            if after:
                self.reasoning.append(after)
            return

        if THINK_CLOSE in line:
            before = line.replace(THINK_CLOSE, "").strip()
            if not self.in_think and not self.reasoning:
                # Some models never emit the opening tag: everything so far was reasoning.
                self.text.append(before)
                self.flush_text()
                if self.parts:
                    self.parts[-1].type = "reasoning"
            else:
                if before:
                    self.reasoning.append(before)
                self.flush_reasoning()
                self.in_think = False
            return

        if self.in_think:
            self.reasoning.append(line)
        else:
            self.text.append(line)

    def finish(self) -> ChatMessage:
        self.flush_text()
        self.flush_reasoning()
        return ChatMessage(id=str(uuid.uuid4()), role=self.role or "user", parts=self.parts)


def text_to_message(block: str) -> ChatMessage:
    parser = _MessageParser()
    for line in block.strip().split("\n"):
        parser.feed(line)
    return parser.finish()


def markdown_to_messages(content: str) -> List[ChatMessage]:
    """Parse stored conversation markdown back into messages."""
    blocks = (content or "").split(MESSAGE_DELIMITER)
    return [text_to_message(block) for block in blocks if block and block.strip()]


def count_code_blocks(markdown: str) -> int:
    """Count fenced (``` or ~~~) code blocks."""
    if not markdown:
        return 0
    return len(FENCED_CODE_BLOCK.findall(markdown))


__all__ = [
    "MESSAGE_DELIMITER",
    "messages_to_markdown",
    "markdown_to_messages",
    "message_to_markdown",
    "text_to_message",
    "count_code_blocks",
]
