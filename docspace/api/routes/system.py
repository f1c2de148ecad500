"""System routes for health checks and keep-alive pings."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Header, HTTPException, status

from ...services.config import get_config
from ...services.database import DatabaseService
from .upload import secret_matches

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "healthy"}


@router.get("/api/cron/keep-alive")
async def keep_alive(
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
):
    """Run a trivial query so an idle hosted database is not paused."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secret_matches(token, get_config().api_secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Invalid cron secret"},
        )
    DatabaseService().ping()
    logger.info("Keep-alive ping succeeded")
    return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}
