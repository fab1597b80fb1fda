"""HTTP API route handlers."""

from . import messages, storage

__all__ = ["storage", "messages"]
