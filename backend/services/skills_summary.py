"""Skills summary accumulator and the flattened skills view.

``SkillsSummary`` is folded once per repository in arrival order. Each fold
returns a new value, so a summary can be shared freely once built.

``summarize_skills`` reshapes a finished ``Insights`` value into the flat
structure consumed by the resume renderer.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from functools import reduce
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from services.snapshot import RepositorySnapshot

if TYPE_CHECKING:
    from services.insights_aggregator import Insights


@dataclass(frozen=True)
class SkillsSummary:
    """Running totals across the scanned repositories."""

    languages: Mapping[str, int] = field(default_factory=dict)
    topics: Mapping[str, int] = field(default_factory=dict)
    total_stars: int = 0
    total_forks: int = 0
    total_contributions: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", MappingProxyType(dict(self.languages)))
        object.__setattr__(self, "topics", MappingProxyType(dict(self.topics)))

    def fold(self, repo: RepositorySnapshot) -> SkillsSummary:
        """Return a new summary with ``repo`` added. Unknown counts add 0."""
        languages = dict(self.languages)
        for lang, size in (repo.languages or {}).items():
            languages[lang] = languages.get(lang, 0) + size

        topics = dict(self.topics)
        for topic in repo.topics or ():
            topics[topic] = topics.get(topic, 0) + 1

        return replace(
            self,
            languages=languages,
            topics=topics,
            total_stars=self.total_stars + (repo.stars or 0),
            total_forks=self.total_forks + (repo.forks or 0),
            total_contributions=self.total_contributions + (repo.user_contributions or 0),
        )

    @classmethod
    def from_repositories(cls, repositories: Iterable[RepositorySnapshot]) -> SkillsSummary:
        return reduce(lambda acc, repo: acc.fold(repo), repositories, cls())

    def to_dict(self) -> dict[str, Any]:
        return {
            "languages": dict(self.languages),
            "topics": dict(self.topics),
            "total_stars": self.total_stars,
            "total_forks": self.total_forks,
            "total_contributions": self.total_contributions,
        }


def summarize_skills(insights: Insights) -> dict[str, Any]:
    """Flatten insights into the skills summary layout.

    Every value is a projection of a field already present (and already
    rounded) in ``insights``; missing sections project to 0 or [].
    """
    stack = insights.technology_stack
    indicators = insights.professional_indicators
    span = insights.career_span

    return {
        "technical_skills": {
            "programming_languages": list(insights.primary_languages.keys()),
            "frameworks": stack.names("frameworks"),
            "databases": stack.names("databases"),
            "cloud_platforms": stack.names("cloud_platforms"),
            "tools_and_practices": stack.names("tools_and_practices"),
        },
        "experience_metrics": {
            "years_active": span.years_active if span else 0,
            "total_projects": insights.coding_activity.total_active_projects,
            "consistency_score": insights.coding_activity.consistency_score,
            "stars_earned": insights.total_stars_earned,
        },
        "professional_indicators": {
            "documentation_quality": indicators.documentation_quality,
            "testing_practices": indicators.testing_practices.testing_percentage,
            "collaboration_experience": (
                indicators.collaboration_experience.collaborative_projects
            ),
            "maintenance_commitment": (
                indicators.maintenance_commitment.maintenance_percentage
            ),
        },
        "architectural_patterns": sorted(stack.architectural_patterns),
        "top_repositories": [r.name for r in insights.most_starred_repos],
    }
