"""Insights aggregation.

Runs every analyzer over a repository collection and merges the results,
together with the ranked repository highlights, into one immutable
``Insights`` value.

The aggregator performs no I/O: repositories and language totals are
assembled by the fetch layer, and rendering/persistence happen downstream.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from app.config import Settings, get_settings
from app.logging_config import get_logger
from app.metrics import INSIGHTS_DURATION, REPOSITORIES_ANALYZED
from services.career_timeline import (
    CareerSpan,
    CodingActivity,
    CommitFrequency,
    analyze_coding_activity,
    analyze_commit_frequency,
    calculate_career_span,
)
from services.language_experience import LanguageExperience, analyze_languages
from services.professional_indicators import (
    ProfessionalIndicators,
    score_professional_indicators,
)
from services.skills_summary import SkillsSummary
from services.snapshot import RepositorySnapshot, parse_timestamp
from services.tech_registry import PROJECT_TYPE_TOPICS, TechnologyRegistry, get_registry
from services.technology_stack import TechnologyStack, detect_technology_stack

logger = get_logger(__name__)

# Sort key for repositories without a usable push timestamp
_EARLIEST = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class StarredRepository:
    name: str
    stars: int | None
    description: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "stars": self.stars, "description": self.description}


@dataclass(frozen=True)
class ContributedRepository:
    name: str
    contributions: int | None
    role: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "contributions": self.contributions, "role": self.role}


@dataclass(frozen=True)
class UpdatedRepository:
    name: str
    last_updated: str | None
    description: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "last_updated": self.last_updated,
            "description": self.description,
        }


@dataclass(frozen=True)
class ExternalContribution:
    name: str
    contributions: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "contributions": self.contributions}


@dataclass(frozen=True)
class Insights:
    """Resume-oriented insights for one scan."""

    generated_at: datetime
    total_stars_earned: int
    total_forks: int
    total_contributions: int
    career_span: CareerSpan | None
    coding_activity: CodingActivity
    commit_frequency: CommitFrequency | None
    primary_languages: Mapping[str, LanguageExperience]
    technology_stack: TechnologyStack
    expertise_areas: Mapping[str, int]
    professional_indicators: ProfessionalIndicators
    most_starred_repos: tuple[StarredRepository, ...] = ()
    most_contributed_repos: tuple[ContributedRepository, ...] = ()
    recently_updated: tuple[UpdatedRepository, ...] = ()
    contributed_to_external: tuple[ExternalContribution, ...] = ()
    project_types: Mapping[str, int] = field(default_factory=dict)
    well_documented_projects: int = 0
    projects_with_contributors: int = 0
    projects_with_releases: int = 0

    def __post_init__(self) -> None:
        for name in ("primary_languages", "expertise_areas", "project_types"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "generated_at": self.generated_at.isoformat(),
            "total_stars_earned": self.total_stars_earned,
            "total_forks": self.total_forks,
            "total_contributions": self.total_contributions,
            "career_span": self.career_span.to_dict() if self.career_span else {},
            "coding_activity": self.coding_activity.to_dict(),
            "commit_frequency": self.commit_frequency.to_dict() if self.commit_frequency else {},
            "primary_languages": {
                lang: stats.to_dict() for lang, stats in self.primary_languages.items()
            },
            "technology_stack": self.technology_stack.to_dict(),
            "expertise_areas": dict(self.expertise_areas),
            "professional_indicators": self.professional_indicators.to_dict(),
            "most_starred_repos": [r.to_dict() for r in self.most_starred_repos],
            "most_contributed_repos": [r.to_dict() for r in self.most_contributed_repos],
            "recently_updated": [r.to_dict() for r in self.recently_updated],
            "contributed_to_external": [r.to_dict() for r in self.contributed_to_external],
            "project_types": dict(self.project_types),
            "well_documented_projects": self.well_documented_projects,
            "projects_with_contributors": self.projects_with_contributors,
            "projects_with_releases": self.projects_with_releases,
        }


# --- Rankings ---


def top_topics(topics: Mapping[str, int], limit: int = 10) -> dict[str, int]:
    """Most frequent topics; equal counts keep insertion order."""
    ranked = sorted(topics.items(), key=lambda item: item[1], reverse=True)
    return dict(ranked[:limit])


def most_starred(
    repositories: Sequence[RepositorySnapshot], limit: int = 5
) -> tuple[StarredRepository, ...]:
    ranked = sorted(repositories, key=lambda r: r.stars or 0, reverse=True)
    return tuple(
        StarredRepository(name=r.name, stars=r.stars, description=r.description)
        for r in ranked[:limit]
    )


def most_contributed(
    repositories: Sequence[RepositorySnapshot], limit: int = 5
) -> tuple[ContributedRepository, ...]:
    ranked = sorted(repositories, key=lambda r: r.user_contributions or 0, reverse=True)
    return tuple(
        ContributedRepository(
            name=r.name,
            contributions=r.user_contributions,
            role="Contributor" if r.is_fork else "Owner",
        )
        for r in ranked[:limit]
    )


def recently_updated(
    repositories: Sequence[RepositorySnapshot], limit: int = 5
) -> tuple[UpdatedRepository, ...]:
    """Latest pushes first; unknown or unparseable pushes rank last."""
    ranked = sorted(
        repositories,
        key=lambda r: parse_timestamp(r.pushed_at) or _EARLIEST,
        reverse=True,
    )
    return tuple(
        UpdatedRepository(name=r.name, last_updated=r.pushed_at, description=r.description)
        for r in ranked[:limit]
    )


def external_contributions(
    repositories: Sequence[RepositorySnapshot],
) -> tuple[ExternalContribution, ...]:
    """Forked repositories the user actually committed to."""
    return tuple(
        ExternalContribution(name=r.name, contributions=r.user_contributions)
        for r in repositories
        if r.is_fork and (r.user_contributions or 0) > 0
    )


def project_type_census(repositories: Sequence[RepositorySnapshot]) -> dict[str, int]:
    return {
        bucket: sum(1 for r in repositories if set(r.topics or ()) & topics)
        for bucket, topics in PROJECT_TYPE_TOPICS.items()
    }


# --- Entry point ---


@INSIGHTS_DURATION.time()
def generate_insights(
    repositories: Sequence[RepositorySnapshot],
    language_bytes: Mapping[str, int] | None = None,
    *,
    registry: TechnologyRegistry | None = None,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> Insights:
    """Derive insights from a scanned repository collection.

    Args:
        repositories: Repository snapshots in scan order
        language_bytes: Cumulative language -> bytes totals; folded from
            the repositories when not supplied
        registry: Technology keyword tables, defaults to the configured registry
        now: Scan time used for maintenance recency, defaults to the current time
        settings: Engine limits, defaults to application settings

    Returns:
        Immutable Insights. Empty input yields zeroed metrics and empty lists.
    """
    settings = settings or get_settings()
    registry = registry or get_registry()
    now = now or datetime.now(UTC)
    repos = tuple(repositories)

    summary = SkillsSummary.from_repositories(repos)
    languages = dict(language_bytes) if language_bytes is not None else summary.languages
    highlight_limit = settings.highlight_limit

    insights = Insights(
        generated_at=now,
        total_stars_earned=summary.total_stars,
        total_forks=summary.total_forks,
        total_contributions=summary.total_contributions,
        career_span=calculate_career_span(repos),
        coding_activity=analyze_coding_activity(repos),
        commit_frequency=analyze_commit_frequency(repos),
        primary_languages=analyze_languages(languages, repos, limit=settings.language_limit),
        technology_stack=detect_technology_stack(repos, registry),
        expertise_areas=top_topics(summary.topics, limit=settings.topic_limit),
        professional_indicators=score_professional_indicators(
            repos, now=now, maintenance_window_days=settings.maintenance_window_days
        ),
        most_starred_repos=most_starred(repos, highlight_limit),
        most_contributed_repos=most_contributed(repos, highlight_limit),
        recently_updated=recently_updated(repos, highlight_limit),
        contributed_to_external=external_contributions(repos),
        project_types=project_type_census(repos),
        well_documented_projects=sum(1 for r in repos if r.has_readme and r.has_license),
        projects_with_contributors=sum(1 for r in repos if (r.total_contributors or 0) > 1),
        projects_with_releases=sum(1 for r in repos if (r.total_releases or 0) > 0),
    )

    REPOSITORIES_ANALYZED.inc(len(repos))
    logger.info(
        "insights_generated",
        repositories=len(repos),
        languages=len(insights.primary_languages),
        patterns=len(insights.technology_stack.architectural_patterns),
    )
    return insights
