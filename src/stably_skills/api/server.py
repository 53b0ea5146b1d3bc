"""
FastAPI HTTP API server for stably-skills.

由 `stably-skills serve` 启动，提供：
- Health check
- Skill list / detail / references
- Task → skill matching
- Catalog

默认端口：18960
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..skills.catalog import SkillCatalog
from ..skills.errors import SkillError, SkillNotFoundError
from ..skills.loader import SkillLoader, builtin_loader
from .routes import health, skills

logger = logging.getLogger(__name__)


def create_app(loader: SkillLoader | None = None) -> FastAPI:
    """Create the FastAPI application with all routes mounted.

    ``loader`` defaults to the process-wide built-in loader. Its registry is
    frozen, so every request handler shares it read-only.
    """
    from stably_skills import __version__

    app = FastAPI(
        title="stably-skills API",
        description="Deliver Stably CLI/SDK skill documents to AI agents",
        version=__version__,
    )

    app.state.loader = loader if loader is not None else builtin_loader()
    # 注册中心已冻结，清单只需生成一次
    app.state.catalog = SkillCatalog(app.state.loader.registry)

    @app.exception_handler(SkillError)
    async def skill_error_handler(request: Request, exc: SkillError):
        status_code = 404 if isinstance(exc, SkillNotFoundError) else 400
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    app.include_router(health.router)
    app.include_router(skills.router)

    logger.info(f"API app created with {app.state.loader.registry.count} skills")
    return app
