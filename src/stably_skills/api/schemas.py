"""Pydantic request/response models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SkillSummary(BaseModel):
    """Level-1 skill metadata."""

    name: str
    description: str = ""
    version: str = ""
    triggers: list[str] = Field(default_factory=list)
    related: list[str] = Field(default_factory=list)
    auto_invoke: bool = True


class SkillDetail(SkillSummary):
    """Skill metadata plus the full body."""

    body: str
    references: list[str] = Field(default_factory=list)


class SkillListResponse(BaseModel):
    skills: list[SkillSummary]


class MatchRequest(BaseModel):
    """Match request body."""

    task: str = Field(..., description="Free-text task description")
    all: bool = Field(False, description="Include the full ranking in the response")


class RankedSkill(BaseModel):
    name: str
    score: int
    hits: list[str] = Field(default_factory=list)


class MatchResponse(BaseModel):
    """Match result. ``matched`` is false when no skill scored above zero."""

    matched: bool
    name: str | None = None
    score: int = 0
    hits: list[str] = Field(default_factory=list)
    body: str | None = None
    ranking: list[RankedSkill] | None = None


class CatalogResponse(BaseModel):
    catalog: str


class ReferenceResponse(BaseModel):
    skill: str
    reference: str
    content: str
