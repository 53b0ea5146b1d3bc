"""
Skills routes:

- GET  /api/skills
- GET  /api/skills/{name}
- GET  /api/skills/{name}/references/{ref}
- POST /api/skills/match
- GET  /api/catalog

未知技能由 app 级异常处理器转换为 404。
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from ...skills.loader import SkillLoader
from ..schemas import (
    CatalogResponse,
    MatchRequest,
    MatchResponse,
    RankedSkill,
    ReferenceResponse,
    SkillDetail,
    SkillListResponse,
    SkillSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _loader(request: Request) -> SkillLoader:
    return request.app.state.loader


@router.get("/api/skills", response_model=SkillListResponse)
async def list_skills(request: Request):
    """List all registered skills (Level 1 metadata), in registration order."""
    registry = _loader(request).registry
    return SkillListResponse(
        skills=[SkillSummary(**meta) for meta in registry.list_metadata()]
    )


@router.post("/api/skills/match", response_model=MatchResponse)
async def match_skill(request: Request, body: MatchRequest):
    """Pick the best skill for a task description.

    A miss is not an error: it returns ``matched: false`` so the agent host
    can fall back to its own behaviour.
    """
    registry = _loader(request).registry
    ranking = registry.rank(body.task)
    ranked = (
        [RankedSkill(name=m.name, score=m.score, hits=list(m.hits)) for m in ranking]
        if body.all
        else None
    )

    if not ranking:
        logger.info(f"No skill matched task: {body.task!r}")
        return MatchResponse(matched=False, ranking=ranked)

    best = ranking[0]
    return MatchResponse(
        matched=True,
        name=best.name,
        score=best.score,
        hits=list(best.hits),
        body=best.body,
        ranking=ranked,
    )


@router.get("/api/skills/{name}", response_model=SkillDetail)
async def get_skill(request: Request, name: str):
    """Full skill record including the verbatim body."""
    loader = _loader(request)
    skill = loader.registry.get(name)
    return SkillDetail(
        **skill.to_metadata(),
        body=skill.body,
        references=loader.list_references(name),
    )


@router.get("/api/skills/{name}/references/{ref}", response_model=ReferenceResponse)
async def get_reference(request: Request, name: str, ref: str):
    """A Level-3 reference document shipped next to SKILL.md."""
    content = _loader(request).get_reference(name, ref)
    return ReferenceResponse(skill=name, reference=ref, content=content)


@router.get("/api/catalog", response_model=CatalogResponse)
async def get_catalog(request: Request):
    """Level-1 catalog for system prompt injection."""
    catalog = request.app.state.catalog
    return CatalogResponse(catalog=catalog.get_catalog())
