"""Career timeline and coding activity.

Derives the active career span from repository and commit timestamps,
the consistency score, coding activity stats and monthly commit frequency.
Unparseable timestamps are dropped, never raised.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any

from app.logging_config import get_logger
from services.snapshot import RepositorySnapshot, parse_date, parse_timestamp

logger = get_logger(__name__)

DAYS_PER_YEAR = 365.25
DAYS_PER_MONTH = 30.44
REGULAR_COMMIT_THRESHOLD = 10
LONG_TERM_MONTHS = 12


@dataclass(frozen=True)
class CareerSpan:
    start_date: date
    latest_activity: date
    years_active: float
    total_active_years: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_date": self.start_date.strftime("%Y-%m"),
            "latest_activity": self.latest_activity.strftime("%Y-%m"),
            "years_active": self.years_active,
            "total_active_years": self.total_active_years,
        }


@dataclass(frozen=True)
class CodingActivity:
    total_active_projects: int = 0
    average_commits_per_project: float = 0.0
    projects_with_regular_commits: int = 0
    long_term_projects: int = 0
    consistency_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_active_projects": self.total_active_projects,
            "average_commits_per_project": self.average_commits_per_project,
            "projects_with_regular_commits": self.projects_with_regular_commits,
            "long_term_projects": self.long_term_projects,
            "consistency_score": self.consistency_score,
        }


@dataclass(frozen=True)
class CommitFrequency:
    commits_per_month: Mapping[str, int] = field(default_factory=dict)
    average_commits_per_month: float = 0.0
    most_active_month: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "commits_per_month", MappingProxyType(dict(self.commits_per_month))
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "commits_per_month": dict(self.commits_per_month),
            "average_commits_per_month": self.average_commits_per_month,
            "most_active_month": self.most_active_month,
        }


def calculate_career_span(repositories: Sequence[RepositorySnapshot]) -> CareerSpan | None:
    """Span between the earliest and latest known activity.

    Uses creation, first-commit and last-commit timestamps of every
    repository. Returns None when none of them parses.
    """
    raw = [
        value
        for repo in repositories
        for value in (repo.created_at, repo.first_commit, repo.last_commit)
        if value is not None
    ]
    dates = [d for d in (parse_date(value) for value in raw) if d is not None]
    if len(dates) < len(raw):
        logger.debug("timestamps_discarded", discarded=len(raw) - len(dates))
    if not dates:
        return None

    earliest = min(dates)
    latest = max(dates)
    return CareerSpan(
        start_date=earliest,
        latest_activity=latest,
        years_active=round((latest - earliest).days / DAYS_PER_YEAR, 1),
        total_active_years=len({d.year for d in dates}),
    )


def _consistency_points(repo: RepositorySnapshot) -> tuple[int, int]:
    """(earned, possible) consistency points for one repository."""
    earned = 0
    possible = 0

    # Documentation
    if repo.has_readme:
        earned += 2
    possible += 2

    # Maintenance
    if repo.important_files:
        earned += 1
    possible += 1

    # Activity
    commits = repo.total_commits or 0
    if commits >= 5:
        earned += 2
    elif commits >= 1:
        earned += 1
    possible += 2

    # Collaboration
    if (repo.total_contributors or 0) > 1:
        earned += 1
    possible += 1

    return earned, possible


def calculate_consistency_score(repositories: Sequence[RepositorySnapshot]) -> float:
    """Earned points over possible points, summed across all repositories.

    This is a ratio of sums, not a mean of per-repository percentages.
    """
    total_earned = 0
    total_possible = 0
    for repo in repositories:
        earned, possible = _consistency_points(repo)
        total_earned += earned
        total_possible += possible

    if total_possible == 0:
        return 0.0
    return round(total_earned / total_possible * 100, 1)


def project_duration_months(repo: RepositorySnapshot) -> int:
    """Months between first and last commit, 0 when either is unknown."""
    start = parse_date(repo.first_commit)
    end = parse_date(repo.last_commit)
    if start is None or end is None:
        return 0
    return round((end - start).days / DAYS_PER_MONTH)


def analyze_coding_activity(repositories: Sequence[RepositorySnapshot]) -> CodingActivity:
    """Commit-based activity stats over repositories with at least one commit."""
    active = [r for r in repositories if (r.total_commits or 0) > 0]
    commit_sum = sum(r.total_commits for r in active)

    return CodingActivity(
        total_active_projects=len(active),
        average_commits_per_project=commit_sum / max(len(active), 1),
        projects_with_regular_commits=sum(
            1 for r in active if r.total_commits >= REGULAR_COMMIT_THRESHOLD
        ),
        long_term_projects=sum(
            1 for r in active if project_duration_months(r) >= LONG_TERM_MONTHS
        ),
        consistency_score=calculate_consistency_score(repositories),
    )


def analyze_commit_frequency(
    repositories: Sequence[RepositorySnapshot],
) -> CommitFrequency | None:
    """Group all known commit dates by month.

    Returns None when no repository carries parseable commit dates.
    """
    commits_per_month: dict[str, int] = {}
    for repo in repositories:
        for value in repo.commit_dates or ():
            committed = parse_timestamp(value)
            if committed is None:
                continue
            month = committed.strftime("%Y-%m")
            commits_per_month[month] = commits_per_month.get(month, 0) + 1

    if not commits_per_month:
        return None

    total = sum(commits_per_month.values())
    return CommitFrequency(
        commits_per_month=commits_per_month,
        average_commits_per_month=round(total / len(commits_per_month), 2),
        most_active_month=max(commits_per_month.items(), key=lambda item: item[1])[0],
    )
