"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from .middleware import register_error_handlers
from .routes import messages, storage
from ..services.config import get_config
from ..services.storage import get_storage_registry

logger = logging.getLogger(__name__)

config = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler to run startup tasks."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        f"Starting storage API (storage_type={config.storage_type}, "
        f"data_store_path={config.data_store_path})"
    )
    try:
        await get_storage_registry().get()
        logger.info("Startup complete: default storage ready")
    except Exception as exc:
        logger.exception(f"Startup failed: {exc}")
        logger.error("App starting without an initialized default storage")
    yield
    get_storage_registry().reset()


app = FastAPI(
    title="Chat Storage API",
    description="Hierarchical markdown document storage for chat conversations",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(storage.router, tags=["storage"])
app.include_router(messages.router, tags=["messages"])


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


__all__ = ["app"]
