"""Repository snapshot model.

One snapshot per analyzed repository, assembled by the fetch layer from
platform API responses. Every field except ``name`` is optional: ``None``
means "unknown", and each consumer documents how it treats an unknown value.

Timestamps are kept as the raw strings the platform returned and parsed on
demand with :func:`parse_timestamp`, which returns ``None`` instead of
raising for malformed input.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FALLBACK_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d", "%Y-%m")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a platform timestamp into an aware UTC datetime.

    Accepts ``datetime``/``date`` objects, ISO-8601 strings (``Z`` or
    ``+HH:MM`` offsets, second or minute precision) and the month-only
    ``2024-01`` form. Values with an offset are converted to UTC; naive
    values are taken as UTC. Returns None for anything that does not parse.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        pass
    else:
        return parsed.astimezone(UTC) if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    dt_str = text[:19].replace("T", " ")
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(dt_str, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return None


def parse_date(value: Any) -> date | None:
    """Like :func:`parse_timestamp` but truncated to the calendar day."""
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else None


def _timestamp_to_str(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _unique(values: tuple[str, ...] | None) -> tuple[str, ...] | None:
    """Drop duplicates while keeping first-seen order."""
    if values is None:
        return None
    return tuple(dict.fromkeys(values))


class RepositorySnapshot(BaseModel):
    """Metadata of one repository as consumed by the insights engine."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Identity
    name: str = Field(..., min_length=1)
    description: str | None = None
    language: str | None = None
    languages: dict[str, int] | None = None

    # Activity
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None
    first_commit: str | None = None
    last_commit: str | None = None
    commit_dates: tuple[str, ...] | None = None
    total_commits: int | None = None
    total_releases: int | None = None

    # Social
    stars: int | None = None
    forks: int | None = None
    total_contributors: int | None = None
    user_contributions: int | None = None
    is_fork: bool | None = None
    is_archived: bool | None = None

    # Structure
    total_directories: int | None = None
    file_types: dict[str, int] | None = None
    important_files: tuple[str, ...] | None = None
    topics: tuple[str, ...] | None = None
    license: str | None = None

    # Documentation
    has_readme: bool | None = None
    readme_size: int | None = None

    # Collaboration
    total_pull_requests: int | None = None
    merged_pull_requests: int | None = None
    total_issues: int | None = None
    closed_issues: int | None = None
    external_contributors: int | None = None

    @field_validator(
        "created_at", "updated_at", "pushed_at", "first_commit", "last_commit", mode="before"
    )
    @classmethod
    def _normalize_timestamp(cls, v: Any) -> Any:
        return _timestamp_to_str(v)

    @field_validator("commit_dates", mode="before")
    @classmethod
    def _normalize_commit_dates(cls, v: Any) -> Any:
        # Anything other than a list is left for type validation to reject
        if isinstance(v, (list, tuple)):
            return tuple(_timestamp_to_str(d) for d in v)
        return v

    @field_validator("important_files", "topics", mode="after")
    @classmethod
    def _dedupe(cls, v: tuple[str, ...] | None) -> tuple[str, ...] | None:
        return _unique(v)

    @property
    def has_license(self) -> bool:
        """A license name was reported or a LICENSE file was detected."""
        if self.license:
            return True
        return any(f.lower() == "license" for f in self.important_files or ())

    def uses_language(self, language: str) -> bool:
        """Primary language or any key of the per-language byte mapping."""
        return self.language == language or language in (self.languages or {})

    def language_names(self) -> set[str]:
        names = set(self.languages or {})
        if self.language:
            names.add(self.language)
        return names
