"""Professional practice indicators.

Five independent metrics over the full repository list: documentation,
testing, project organization, collaboration and maintenance.
Percentages are rounded to one decimal and are 0 for an empty list.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from services.snapshot import RepositorySnapshot, parse_date

README_MIN_BYTES = 500
MIN_STRUCTURE_DIRECTORIES = 3
DEFAULT_MAINTENANCE_WINDOW_DAYS = 365

TEST_INDICATORS = ("test", "spec", ".test.", "_test.", "jest", "pytest", "rspec", "mocha")


def _percentage(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total > 0 else 0.0


@dataclass(frozen=True)
class TestingPractices:
    repos_with_tests: int
    testing_percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "repos_with_tests": self.repos_with_tests,
            "testing_percentage": self.testing_percentage,
        }


@dataclass(frozen=True)
class ProjectOrganization:
    well_organized_projects: int
    organization_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "well_organized_projects": self.well_organized_projects,
            "organization_score": self.organization_score,
        }


@dataclass(frozen=True)
class CollaborationExperience:
    collaborative_projects: int
    total_external_contributors: int
    projects_with_prs: int
    average_contributors_per_project: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "collaborative_projects": self.collaborative_projects,
            "total_external_contributors": self.total_external_contributors,
            "projects_with_prs": self.projects_with_prs,
            "average_contributors_per_project": self.average_contributors_per_project,
        }


@dataclass(frozen=True)
class MaintenanceCommitment:
    recently_maintained_projects: int
    maintenance_percentage: float
    projects_with_releases: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "recently_maintained_projects": self.recently_maintained_projects,
            "maintenance_percentage": self.maintenance_percentage,
            "projects_with_releases": self.projects_with_releases,
        }


@dataclass(frozen=True)
class ProfessionalIndicators:
    documentation_quality: float
    testing_practices: TestingPractices
    project_organization: ProjectOrganization
    collaboration_experience: CollaborationExperience
    maintenance_commitment: MaintenanceCommitment

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentation_quality": self.documentation_quality,
            "testing_practices": self.testing_practices.to_dict(),
            "project_organization": self.project_organization.to_dict(),
            "collaboration_experience": self.collaboration_experience.to_dict(),
            "maintenance_commitment": self.maintenance_commitment.to_dict(),
        }


def calculate_documentation_score(repositories: Sequence[RepositorySnapshot]) -> float:
    """Share of repositories with a README longer than 500 bytes.

    Unknown readme flag or size counts as undocumented.
    """
    documented = sum(
        1 for r in repositories if r.has_readme and (r.readme_size or 0) > README_MIN_BYTES
    )
    return _percentage(documented, len(repositories))


def _has_tests(repo: RepositorySnapshot) -> bool:
    if any(ind in ext for ext in (repo.file_types or {}) for ind in TEST_INDICATORS):
        return True
    return any(
        ind in name.lower() for name in (repo.important_files or ()) for ind in TEST_INDICATORS
    )


def analyze_testing_practices(repositories: Sequence[RepositorySnapshot]) -> TestingPractices:
    with_tests = sum(1 for r in repositories if _has_tests(r))
    return TestingPractices(
        repos_with_tests=with_tests,
        testing_percentage=_percentage(with_tests, len(repositories)),
    )


def analyze_project_organization(
    repositories: Sequence[RepositorySnapshot],
) -> ProjectOrganization:
    """Repositories meeting at least 2 of: license, >= 3 directories, README."""
    well_organized = 0
    for repo in repositories:
        signals = [
            repo.has_license,
            (repo.total_directories or 0) >= MIN_STRUCTURE_DIRECTORIES,
            bool(repo.has_readme),
        ]
        if signals.count(True) >= 2:
            well_organized += 1

    return ProjectOrganization(
        well_organized_projects=well_organized,
        organization_score=_percentage(well_organized, len(repositories)),
    )


def analyze_collaboration(repositories: Sequence[RepositorySnapshot]) -> CollaborationExperience:
    """Collaboration stats. Unknown contributor count is treated as a solo project (1)."""
    collaborative = [r for r in repositories if (r.total_contributors or 0) > 1]
    total = len(repositories)
    contributors_sum = sum(r.total_contributors or 1 for r in repositories)

    return CollaborationExperience(
        collaborative_projects=len(collaborative),
        total_external_contributors=sum(r.total_contributors - 1 for r in collaborative),
        projects_with_prs=sum(1 for r in repositories if (r.total_pull_requests or 0) > 0),
        average_contributors_per_project=(
            round(contributors_sum / total, 1) if total > 0 else 0.0
        ),
    )


def analyze_maintenance(
    repositories: Sequence[RepositorySnapshot],
    now: datetime | None = None,
    window_days: int = DEFAULT_MAINTENANCE_WINDOW_DAYS,
) -> MaintenanceCommitment:
    """Repositories pushed within ``window_days`` of ``now``.

    Missing or unparseable ``pushed_at`` counts as not maintained.
    """
    cutoff = (now or datetime.now(UTC)).date() - timedelta(days=window_days)

    recently_maintained = 0
    for repo in repositories:
        pushed = parse_date(repo.pushed_at)
        if pushed is not None and pushed >= cutoff:
            recently_maintained += 1

    return MaintenanceCommitment(
        recently_maintained_projects=recently_maintained,
        maintenance_percentage=_percentage(recently_maintained, len(repositories)),
        projects_with_releases=sum(1 for r in repositories if (r.total_releases or 0) > 0),
    )


def score_professional_indicators(
    repositories: Sequence[RepositorySnapshot],
    now: datetime | None = None,
    maintenance_window_days: int = DEFAULT_MAINTENANCE_WINDOW_DAYS,
) -> ProfessionalIndicators:
    """Compute all five indicators for ``repositories``."""
    return ProfessionalIndicators(
        documentation_quality=calculate_documentation_score(repositories),
        testing_practices=analyze_testing_practices(repositories),
        project_organization=analyze_project_organization(repositories),
        collaboration_experience=analyze_collaboration(repositories),
        maintenance_commitment=analyze_maintenance(repositories, now, maintenance_window_days),
    )
