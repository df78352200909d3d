"""Repository selection before analysis.

Applies the scan filters (forks, archived, language, minimum stars,
limit) and orders the remaining repositories by stars.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from app.logging_config import get_logger
from services.snapshot import RepositorySnapshot

logger = get_logger(__name__)


class RepositoryFilter(BaseModel):
    """Scan filter criteria."""

    skip_forks: bool = False
    skip_archived: bool = False
    language: str | None = Field(None, min_length=1, max_length=100)
    min_stars: int = Field(0, ge=0)
    limit: int | None = Field(None, ge=1)


def filter_repositories(
    repositories: Sequence[RepositorySnapshot],
    criteria: RepositoryFilter | None = None,
) -> list[RepositorySnapshot]:
    """Select and order repositories for a scan.

    Unknown fork/archived flags count as False and unknown stars as 0.
    The result is sorted by stars descending; ties keep input order.
    """
    criteria = criteria or RepositoryFilter()

    selected = list(repositories)
    if criteria.skip_forks:
        selected = [r for r in selected if not r.is_fork]
    if criteria.skip_archived:
        selected = [r for r in selected if not r.is_archived]
    if criteria.language:
        selected = [r for r in selected if r.language == criteria.language]
    selected = [r for r in selected if (r.stars or 0) >= criteria.min_stars]

    selected.sort(key=lambda r: r.stars or 0, reverse=True)
    if criteria.limit is not None:
        selected = selected[: criteria.limit]

    logger.info(
        "repositories_filtered",
        received=len(repositories),
        selected=len(selected),
    )
    return selected
