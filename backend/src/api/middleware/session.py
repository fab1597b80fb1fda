"""Session dependency: resolves which cached backend serves a request."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Header, Query

from ...services.storage import DEFAULT_SESSION, StorageBackend, get_storage_registry


def get_session_id(
    x_test_session: Annotated[Optional[str], Header(alias="x-test-session")] = None,
    test_session: Annotated[Optional[str], Query(alias="testSession")] = None,
) -> str:
    """Session id from the ``x-test-session`` header, the ``testSession`` query, else ``default``."""
    return x_test_session or test_session or DEFAULT_SESSION


async def get_session_storage(
    session_id: Annotated[str, Depends(get_session_id)],
) -> StorageBackend:
    """Backend cached for the caller's session."""
    return await get_storage_registry().get(session_id)


__all__ = ["get_session_id", "get_session_storage"]
