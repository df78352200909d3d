"""Technology registry endpoint.

GET /api/v1/technologies - List the keyword tables used for detection
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import registry_dependency
from services.tech_registry import TechnologyRegistry
from services.technology_stack import ARCHITECTURAL_PATTERNS

router = APIRouter()


class TechnologiesResponse(BaseModel):
    categories: dict[str, dict[str, list[str]]]
    architectural_patterns: list[str]


@router.get("/technologies", response_model=TechnologiesResponse)
async def list_technologies(
    registry: TechnologyRegistry = Depends(registry_dependency),
) -> TechnologiesResponse:
    """List detectable technologies and their keywords per category."""
    return TechnologiesResponse(
        categories=registry.to_dict(),
        architectural_patterns=list(ARCHITECTURAL_PATTERNS),
    )
