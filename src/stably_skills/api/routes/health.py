"""
Health check route: GET /api/health
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/health")
async def health(request: Request):
    """Basic health check - returns 200 if server is running."""
    from stably_skills import __version__

    registry = request.app.state.loader.registry
    return {
        "status": "ok",
        "service": "stably-skills",
        "version": __version__,
        "skills": registry.count,
    }
