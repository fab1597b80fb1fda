"""Split and join Markdown documents with a YAML front matter header."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, NamedTuple, Optional

import yaml
from frontmatter.default_handlers import YAMLHandler

logger = logging.getLogger(__name__)

DELIMITER = "---"
# The header must start at byte 0. Horizontal whitespace after a delimiter is
# tolerated; blank lines after the closing delimiter belong to the body.
FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*\r?\n(.*)\Z", re.DOTALL)

_handler = YAMLHandler()


class ParsedDocument(NamedTuple):
    metadata: Dict[str, Any]
    content: str


def _string_keys(value: Any) -> Any:
    """YAML turns keys like `on`, `yes` or `2024` into bools and ints; metadata keys are always strings."""
    if isinstance(value, dict):
        return {str(key): _string_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_string_keys(item) for item in value]
    return value


def parse(text: str) -> ParsedDocument:
    """
    Split ``text`` into metadata and body.

    Documents without a header come back unchanged with empty metadata.
    A header that is not valid YAML, or not a mapping, yields empty metadata
    and the text after the closing delimiter.
    """
    match = FRONT_MATTER_PATTERN.match(text or "")
    if not match:
        return ParsedDocument({}, text or "")

    header, body = match.group(1), match.group(2)
    try:
        loaded = _handler.load(header)
    except yaml.YAMLError as exc:
        logger.warning(f"Failed to parse YAML front matter: {exc}; preview={header[:200]!r}")
        return ParsedDocument({}, body)

    if loaded is None:
        return ParsedDocument({}, body)
    if not isinstance(loaded, dict):
        logger.warning(f"Front matter is not a mapping ({type(loaded).__name__}); ignoring it")
        return ParsedDocument({}, body)
    return ParsedDocument(_string_keys(loaded), body)


def serialize(metadata: Optional[Dict[str, Any]], content: str) -> str:
    """Join metadata and body. Empty metadata emits no header at all."""
    if not metadata:
        return content
    header = _handler.export(dict(metadata), sort_keys=False)
    return f"{DELIMITER}\n{header}\n{DELIMITER}\n{content}"


def read_metadata(text: str) -> Dict[str, Any]:
    return parse(text).metadata


def read_body(text: str) -> str:
    return parse(text).content


def replace_body(text: str, content: str) -> str:
    """Swap the body of a document, keeping its header."""
    return serialize(parse(text).metadata, content)


def replace_metadata(text: str, metadata: Optional[Dict[str, Any]]) -> str:
    """Swap the header of a document wholesale, keeping its body."""
    return serialize(metadata, parse(text).content)


__all__ = [
    "ParsedDocument",
    "parse",
    "serialize",
    "read_metadata",
    "read_body",
    "replace_body",
    "replace_metadata",
]
