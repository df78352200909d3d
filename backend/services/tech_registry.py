"""Technology keyword registry.

Detection tables are plain data: category -> technology -> keywords.
The defaults below can be extended or overridden from a JSON file
(``RI_TECH_REGISTRY_PATH``) shaped the same way, e.g.::

    {"frameworks": {"Remix": ["remix"]}, "databases": {"DynamoDB": ["dynamodb"]}}

Keywords are matched as lowercase substrings by the stack detector.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.config import get_settings
from app.exceptions import RegistryConfigError
from app.logging_config import get_logger

logger = get_logger(__name__)

KeywordTable = dict[str, tuple[str, ...]]

TECHNOLOGY_CATEGORIES = ("frameworks", "databases", "cloud_platforms", "tools_and_practices")

DEFAULT_FRAMEWORKS: dict[str, list[str]] = {
    "React": ["react", "jsx", "create-react-app"],
    "Vue.js": ["vue", "nuxt"],
    "Angular": ["angular", "@angular"],
    "Express.js": ["express", "expressjs"],
    "Django": ["django", "requirements.txt"],
    "Rails": ["rails", "gemfile"],
    "Spring": ["spring", "maven", "gradle"],
    "Flask": ["flask"],
    "FastAPI": ["fastapi"],
    "Next.js": ["next", "nextjs"],
    "Svelte": ["svelte"],
    "Laravel": ["laravel", "composer.json"],
}

DEFAULT_DATABASES: dict[str, list[str]] = {
    "MongoDB": ["mongodb", "mongoose"],
    "PostgreSQL": ["postgresql", "postgres", "pg"],
    "MySQL": ["mysql"],
    "Redis": ["redis"],
    "SQLite": ["sqlite"],
    "Elasticsearch": ["elasticsearch", "elastic"],
    "Firebase": ["firebase"],
}

DEFAULT_CLOUD_PLATFORMS: dict[str, list[str]] = {
    "AWS": ["aws", "amazon", "s3", "ec2", "lambda"],
    "Google Cloud": ["gcp", "google-cloud", "firebase"],
    "Azure": ["azure", "microsoft"],
    "Heroku": ["heroku"],
    "Vercel": ["vercel"],
    "Netlify": ["netlify"],
    "DigitalOcean": ["digitalocean"],
}

DEFAULT_TOOLS_AND_PRACTICES: dict[str, list[str]] = {
    "Docker": ["docker", "dockerfile"],
    "Kubernetes": ["kubernetes", "k8s"],
    "CI/CD": ["github/workflows", ".travis.yml", "jenkins", "gitlab-ci"],
    "Testing": ["test", "spec", "jest", "pytest", "rspec"],
    "TypeScript": ["typescript", ".ts"],
    "GraphQL": ["graphql"],
    "REST API": ["api", "rest", "endpoint"],
    "Microservices": ["microservice", "service"],
    "WebSocket": ["websocket", "socket.io"],
}

# Language groups for the Full-Stack pattern
FRONTEND_LANGUAGES = frozenset({"JavaScript", "TypeScript", "HTML", "CSS", "Vue", "React"})
BACKEND_LANGUAGES = frozenset({"Python", "Ruby", "Java", "Go", "C#", "PHP", "Node.js"})

MOBILE_TOPICS = frozenset({"mobile", "ios", "android", "react-native", "flutter"})

# Project type census buckets, matched against exact topic names
PROJECT_TYPE_TOPICS: dict[str, frozenset[str]] = {
    "web_apps": frozenset({"web", "webapp", "frontend", "backend"}),
    "libraries": frozenset({"library", "framework", "package"}),
    "tools": frozenset({"cli", "tool", "utility"}),
    "data_science": frozenset({"data-science", "machine-learning", "ai", "ml"}),
    "mobile": frozenset({"mobile", "ios", "android", "react-native"}),
}

_OVERRIDE_ADAPTER = TypeAdapter(dict[str, dict[str, list[str]]])


def _normalize(table: Mapping[str, Sequence[str]]) -> KeywordTable:
    return {tech: tuple(k.lower() for k in keywords) for tech, keywords in table.items()}


@dataclass(frozen=True)
class TechnologyRegistry:
    """Keyword tables per technology category."""

    categories: dict[str, KeywordTable] = field(
        default_factory=lambda: {
            "frameworks": _normalize(DEFAULT_FRAMEWORKS),
            "databases": _normalize(DEFAULT_DATABASES),
            "cloud_platforms": _normalize(DEFAULT_CLOUD_PLATFORMS),
            "tools_and_practices": _normalize(DEFAULT_TOOLS_AND_PRACTICES),
        }
    )
    frontend_languages: frozenset[str] = FRONTEND_LANGUAGES
    backend_languages: frozenset[str] = BACKEND_LANGUAGES
    mobile_topics: frozenset[str] = MOBILE_TOPICS

    def table(self, category: str) -> KeywordTable:
        return self.categories.get(category, {})

    def with_overrides(
        self, overrides: Mapping[str, Mapping[str, Sequence[str]]]
    ) -> TechnologyRegistry:
        """Return a registry with ``overrides`` merged in.

        A technology listed in ``overrides`` replaces the keyword list of the
        same name; new technologies and new categories are appended.
        """
        merged = {category: dict(table) for category, table in self.categories.items()}
        for category, table in overrides.items():
            merged.setdefault(category, {}).update(_normalize(table))
        return replace(self, categories=merged)

    def to_dict(self) -> dict[str, Any]:
        return {
            category: {tech: list(keywords) for tech, keywords in table.items()}
            for category, table in self.categories.items()
        }


def load_overrides(path: Path) -> dict[str, dict[str, list[str]]]:
    """Read and validate a registry override file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RegistryConfigError(
            "Technology registry file could not be read",
            details={"path": str(path)},
        ) from exc
    except json.JSONDecodeError as exc:
        raise RegistryConfigError(
            "Technology registry file is not valid JSON",
            details={"path": str(path), "line": exc.lineno},
        ) from exc

    try:
        return _OVERRIDE_ADAPTER.validate_python(raw)
    except PydanticValidationError as exc:
        raise RegistryConfigError(
            "Technology registry must map category -> technology -> keyword list",
            details={"path": str(path), "errors": exc.error_count()},
        ) from exc


def build_registry(path: Path | None = None) -> TechnologyRegistry:
    """Default registry, with the overrides at ``path`` applied when given."""
    registry = TechnologyRegistry()
    if path is None:
        return registry

    overrides = load_overrides(path)
    logger.info(
        "tech_registry_loaded",
        path=str(path),
        categories=len(overrides),
        technologies=sum(len(table) for table in overrides.values()),
    )
    return registry.with_overrides(overrides)


@lru_cache
def get_registry() -> TechnologyRegistry:
    """Get the cached registry configured by settings."""
    return build_registry(get_settings().tech_registry_path)
