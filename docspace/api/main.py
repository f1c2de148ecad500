"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..services.database import init_database
from .middleware import register_error_handlers
from .routes import admin, ai, documents, folders, me, search, system, upload

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler to run startup tasks."""
    db_path = init_database()
    logger.info("Database ready at %s", db_path)
    yield


app = FastAPI(
    title="DocSpace API",
    description="Per-user Markdown documents in folders with AI transformations",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(folders.router, tags=["folders"])
app.include_router(documents.router, tags=["documents"])
app.include_router(search.router, tags=["search"])
app.include_router(ai.router, tags=["ai"])
app.include_router(me.router, tags=["me"])
app.include_router(admin.router, tags=["admin"])
app.include_router(upload.router, tags=["upload"])
app.include_router(system.router, tags=["system"])


__all__ = ["app"]
