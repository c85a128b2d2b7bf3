# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoint."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field

from academy.infrastructure.database.connection import DatabaseError, db_connector

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""
    ok: bool = Field(description="The process is serving requests")
    db: str = Field(description="Database status: connected or disconnected")


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Report liveness and database reachability.",
)
async def health() -> HealthResponse:
    """Check the process and the database.

    Connects lazily if no connection exists yet; a failed connection is
    reported, not raised.
    """
    try:
        await db_connector.connect()
    except DatabaseError as e:
        logger.warning("Health check could not connect to the database: %s", e)

    reachable = await db_connector.ping()
    return HealthResponse(ok=True, db="connected" if reachable else "disconnected")
