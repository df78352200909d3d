"""Technology stack detection.

Classifies repositories into frameworks, databases, cloud platforms and
tools via keyword substring matching against the technology registry,
and detects architectural patterns with dedicated predicates.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from app.logging_config import get_logger
from app.metrics import TECHNOLOGIES_DETECTED
from services.snapshot import RepositorySnapshot
from services.tech_registry import TECHNOLOGY_CATEGORIES, KeywordTable, TechnologyRegistry

logger = get_logger(__name__)

EXAMPLE_PROJECT_LIMIT = 3

API_DESCRIPTION_PATTERN = re.compile(r"api|rest|graphql", re.IGNORECASE)


@dataclass(frozen=True)
class TechnologyMatch:
    """Repositories matching one technology."""

    project_count: int
    projects: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"project_count": self.project_count, "projects": list(self.projects)}


@dataclass(frozen=True)
class TechnologyStack:
    """Detected technologies per category plus architectural patterns.

    ``categories`` only holds categories with at least one match.
    """

    categories: Mapping[str, Mapping[str, TechnologyMatch]] = field(default_factory=dict)
    architectural_patterns: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        frozen = {name: MappingProxyType(dict(techs)) for name, techs in self.categories.items()}
        object.__setattr__(self, "categories", MappingProxyType(frozen))

    def get(self, category: str) -> Mapping[str, TechnologyMatch]:
        return self.categories.get(category, {})

    def names(self, category: str) -> list[str]:
        return list(self.get(category).keys())

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            category: {tech: match.to_dict() for tech, match in techs.items()}
            for category, techs in self.categories.items()
        }
        if self.architectural_patterns:
            result["architectural_patterns"] = sorted(self.architectural_patterns)
        return result


def _searchable_text(repo: RepositorySnapshot) -> list[str]:
    """Lowercased name, description, topics and important files."""
    fields = [repo.name, repo.description, *(repo.topics or ()), *(repo.important_files or ())]
    return [f.lower() for f in fields if f]


def detect_from_keywords(
    repositories: Sequence[RepositorySnapshot],
    table: KeywordTable,
) -> dict[str, TechnologyMatch]:
    """Match every technology in ``table`` against every repository.

    A repository matches when any keyword is a substring of any of its
    searchable fields. Technologies without matches are left out.
    """
    texts = [(repo.name, _searchable_text(repo)) for repo in repositories]

    detected: dict[str, TechnologyMatch] = {}
    for tech, keywords in table.items():
        matches = [
            name
            for name, fields in texts
            if any(keyword in text for keyword in keywords for text in fields)
        ]
        if matches:
            detected[tech] = TechnologyMatch(
                project_count=len(matches),
                projects=tuple(matches[:EXAMPLE_PROJECT_LIMIT]),
            )
    return detected


# --- Architectural patterns ---


def _is_monorepo(repos: Sequence[RepositorySnapshot], _registry: TechnologyRegistry) -> bool:
    return any(
        ".json" in (r.file_types or {}) and (r.total_directories or 0) > 10 for r in repos
    )


def _is_microservices(repos: Sequence[RepositorySnapshot], _registry: TechnologyRegistry) -> bool:
    count = sum(
        1 for r in repos if "service" in r.name or "service" in (r.description or "")
    )
    return count >= 2


def _is_api_first(repos: Sequence[RepositorySnapshot], _registry: TechnologyRegistry) -> bool:
    count = sum(
        1
        for r in repos
        if "api" in r.name or API_DESCRIPTION_PATTERN.search(r.description or "")
    )
    return count >= 2


def _is_full_stack(repos: Sequence[RepositorySnapshot], registry: TechnologyRegistry) -> bool:
    # Front and back end may come from the same repository or different ones
    has_frontend = any(r.language_names() & registry.frontend_languages for r in repos)
    has_backend = any(r.language_names() & registry.backend_languages for r in repos)
    return has_frontend and has_backend


def _is_mobile(repos: Sequence[RepositorySnapshot], registry: TechnologyRegistry) -> bool:
    return any(set(r.topics or ()) & registry.mobile_topics for r in repos)


PatternPredicate = Callable[[Sequence[RepositorySnapshot], TechnologyRegistry], bool]

ARCHITECTURAL_PATTERNS: dict[str, PatternPredicate] = {
    "Monorepo": _is_monorepo,
    "Microservices": _is_microservices,
    "API-First": _is_api_first,
    "Full-Stack": _is_full_stack,
    "Mobile Development": _is_mobile,
}


def detect_architectural_patterns(
    repositories: Sequence[RepositorySnapshot],
    registry: TechnologyRegistry | None = None,
) -> frozenset[str]:
    """Names of the patterns whose predicate holds for ``repositories``."""
    registry = registry or TechnologyRegistry()
    return frozenset(
        name
        for name, predicate in ARCHITECTURAL_PATTERNS.items()
        if predicate(repositories, registry)
    )


def detect_technology_stack(
    repositories: Sequence[RepositorySnapshot],
    registry: TechnologyRegistry | None = None,
) -> TechnologyStack:
    """Detect technologies and architectural patterns across all repositories.

    Args:
        repositories: All scanned repositories
        registry: Keyword tables, defaults to the built-in registry

    Returns:
        TechnologyStack with empty categories pruned
    """
    registry = registry or TechnologyRegistry()

    categories: dict[str, dict[str, TechnologyMatch]] = {}
    category_names = list(TECHNOLOGY_CATEGORIES) + [
        c for c in registry.categories if c not in TECHNOLOGY_CATEGORIES
    ]
    for category in category_names:
        detected = detect_from_keywords(repositories, registry.table(category))
        if detected:
            categories[category] = detected
            TECHNOLOGIES_DETECTED.labels(category=category).inc(len(detected))

    patterns = detect_architectural_patterns(repositories, registry)
    if patterns:
        TECHNOLOGIES_DETECTED.labels(category="architectural_patterns").inc(len(patterns))

    logger.debug(
        "technology_stack_detected",
        categories=sorted(categories),
        patterns=sorted(patterns),
    )
    return TechnologyStack(categories=categories, architectural_patterns=patterns)
