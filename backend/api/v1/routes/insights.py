"""Insights endpoint.

POST /api/v1/insights - Derive resume insights from repository snapshots
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import registry_dependency, settings_dependency
from app.config import Settings
from app.exceptions import ValidationError
from app.logging_config import get_logger
from services.insights_aggregator import generate_insights
from services.repository_filter import RepositoryFilter, filter_repositories
from services.skills_summary import summarize_skills
from services.snapshot import RepositorySnapshot
from services.tech_registry import TechnologyRegistry

logger = get_logger(__name__)
router = APIRouter()


class InsightsRequest(BaseModel):
    """Already-fetched scan data."""

    repositories: list[RepositorySnapshot] = Field(default_factory=list)
    language_bytes: dict[str, int] | None = None
    filters: RepositoryFilter | None = None


class InsightsResponse(BaseModel):
    """Derived insights plus the flattened skills summary."""

    insights: dict
    skills_summary: dict
    meta: dict


@router.post("/insights", response_model=InsightsResponse)
async def create_insights(
    request: InsightsRequest,
    settings: Settings = Depends(settings_dependency),
    registry: TechnologyRegistry = Depends(registry_dependency),
) -> InsightsResponse:
    """Derive insights from the submitted repository snapshots.

    Nothing is fetched or stored: the response is a pure function of
    the request body and the active technology registry.
    """
    if len(request.repositories) > settings.max_repositories:
        raise ValidationError(
            "Too many repositories in one scan",
            details={
                "received": len(request.repositories),
                "max_repositories": settings.max_repositories,
            },
        )

    repositories = request.repositories
    if request.filters is not None:
        repositories = filter_repositories(repositories, request.filters)

    insights = generate_insights(
        repositories,
        request.language_bytes,
        registry=registry,
        settings=settings,
    )

    request_id = structlog.contextvars.get_contextvars().get("request_id") or str(uuid.uuid4())
    logger.info("insights_served", repositories=len(repositories))
    return InsightsResponse(
        insights=insights.to_dict(),
        skills_summary=summarize_skills(insights),
        meta={
            "request_id": request_id,
            "repositories_received": len(request.repositories),
            "repositories_analyzed": len(repositories),
        },
    )
