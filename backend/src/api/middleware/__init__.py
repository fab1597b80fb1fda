"""FastAPI middleware for sessions and error handling."""

from .error_handlers import (
    error_body,
    http_exception_handler,
    internal_exception_handler,
    register_error_handlers,
    validation_exception_handler,
)
from .session import get_session_id, get_session_storage

__all__ = [
    "get_session_id",
    "get_session_storage",
    "error_body",
    "register_error_handlers",
    "validation_exception_handler",
    "http_exception_handler",
    "internal_exception_handler",
]
