"""Language experience analysis.

Ranks languages by cumulative byte volume and assigns an experience
level from byte volume and the number of projects using the language.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.logging_config import get_logger
from app.metrics import EXPERIENCE_LEVELS_ASSIGNED
from services.snapshot import RepositorySnapshot, parse_timestamp

logger = get_logger(__name__)

DEFAULT_LANGUAGE_LIMIT = 8


def determine_experience_level(total_bytes: int, project_count: int) -> str:
    """Map (bytes, project count) to an experience level. First match wins."""
    if project_count >= 5 and total_bytes >= 100_000:
        return "Expert"
    if project_count >= 3 and total_bytes >= 50_000:
        return "Proficient"
    if project_count >= 2 or total_bytes >= 20_000:
        return "Intermediate"
    return "Familiar"


@dataclass(frozen=True)
class LanguageExperience:
    """Experience stats for one language."""

    total_bytes: int
    project_count: int
    most_recent_use: str | None
    experience_level: str
    percentage: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_bytes": self.total_bytes,
            "project_count": self.project_count,
            "most_recent_use": self.most_recent_use,
            "experience_level": self.experience_level,
            "percentage": self.percentage,
        }


def _most_recent_push(repos: Sequence[RepositorySnapshot]) -> str | None:
    """Latest parseable ``pushed_at`` among ``repos``, as the raw value."""
    latest: tuple[datetime, str] | None = None
    for repo in repos:
        pushed = parse_timestamp(repo.pushed_at)
        if pushed is None:
            continue
        if latest is None or pushed > latest[0]:
            latest = (pushed, repo.pushed_at)
    return latest[1] if latest else None


def analyze_languages(
    languages: Mapping[str, int],
    repositories: Sequence[RepositorySnapshot],
    limit: int = DEFAULT_LANGUAGE_LIMIT,
) -> dict[str, LanguageExperience]:
    """Build experience stats for the top ``limit`` languages by bytes.

    Args:
        languages: Cumulative language -> bytes mapping
        repositories: All scanned repositories

    Returns:
        Ordered mapping language -> LanguageExperience, largest first.
        Equal byte counts keep the iteration order of ``languages``.
    """
    if not languages:
        return {}

    grand_total = sum(languages.values())
    ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)[:limit]

    stats: dict[str, LanguageExperience] = {}
    for lang, total_bytes in ranked:
        matching = [r for r in repositories if r.uses_language(lang)]
        level = determine_experience_level(total_bytes, len(matching))
        stats[lang] = LanguageExperience(
            total_bytes=total_bytes,
            project_count=len(matching),
            most_recent_use=_most_recent_push(matching),
            experience_level=level,
            percentage=round(total_bytes / grand_total * 100, 2) if grand_total > 0 else 0.0,
        )
        EXPERIENCE_LEVELS_ASSIGNED.labels(level=level).inc()

    logger.debug("languages_analyzed", languages=len(stats), candidates=len(languages))
    return stats

