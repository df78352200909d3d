"""Tests for professional practice indicators."""

from datetime import UTC, datetime

from services.professional_indicators import (
    analyze_collaboration,
    analyze_maintenance,
    analyze_project_organization,
    analyze_testing_practices,
    calculate_documentation_score,
    score_professional_indicators,
)
from services.snapshot import RepositorySnapshot

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def _repo(name: str = "repo", **fields) -> RepositorySnapshot:
    return RepositorySnapshot(name=name, **fields)


class TestEmptyInput:
    """No repositories degrades to zeros, never a division error."""

    def test_all_zero(self):
        result = score_professional_indicators([], now=NOW)
        assert result.documentation_quality == 0
        assert result.testing_practices.testing_percentage == 0
        assert result.project_organization.organization_score == 0
        assert result.collaboration_experience.average_contributors_per_project == 0
        assert result.maintenance_commitment.maintenance_percentage == 0


class TestDocumentation:
    def test_requires_readme_over_500_bytes(self):
        repos = [
            _repo("a", has_readme=True, readme_size=501),
            _repo("b", has_readme=True, readme_size=500),
            _repo("c", has_readme=True),
            _repo("d", readme_size=9000),
        ]
        assert calculate_documentation_score(repos) == 25.0

    def test_rounded_to_one_decimal(self):
        repos = [_repo("a", has_readme=True, readme_size=600), _repo("b"), _repo("c")]
        assert calculate_documentation_score(repos) == 33.3


class TestTestingPractices:
    def test_file_extension_indicator(self):
        result = analyze_testing_practices([_repo("a", file_types={".spec": 2}), _repo("b")])
        assert result.repos_with_tests == 1
        assert result.testing_percentage == 50.0

    def test_important_file_indicator_case_insensitive(self):
        result = analyze_testing_practices([_repo("a", important_files=["Pytest.ini"])])
        assert result.repos_with_tests == 1

    def test_no_indicators(self):
        repos = [_repo("a", file_types={".py": 3}, important_files=["README.md"])]
        assert analyze_testing_practices(repos).repos_with_tests == 0


class TestProjectOrganization:
    def test_two_of_three_signals(self):
        repos = [
            _repo("license-readme", license="MIT", has_readme=True),
            _repo("dirs-readme", total_directories=3, has_readme=True),
            _repo("license-only", important_files=["LICENSE"]),
            _repo("dirs-only", total_directories=12),
        ]
        result = analyze_project_organization(repos)
        assert result.well_organized_projects == 2
        assert result.organization_score == 50.0


class TestCollaboration:
    def test_collaboration_stats(self):
        repos = [
            _repo("team", total_contributors=4, total_pull_requests=7),
            _repo("pair", total_contributors=2),
            _repo("solo", total_contributors=1, total_pull_requests=1),
            _repo("unknown"),
        ]
        result = analyze_collaboration(repos)
        assert result.collaborative_projects == 2
        assert result.total_external_contributors == 4
        assert result.projects_with_prs == 2
        # (4 + 2 + 1 + 1) / 4
        assert result.average_contributors_per_project == 2.0


class TestMaintenance:
    def test_recent_pushes(self):
        repos = [
            _repo("fresh", pushed_at="2025-12-01T00:00:00Z", total_releases=2),
            _repo("edge", pushed_at="2025-01-15T00:00:00Z"),
            _repo("stale", pushed_at="2024-01-01T00:00:00Z"),
            _repo("broken", pushed_at="yesterday-ish"),
            _repo("never"),
        ]
        result = analyze_maintenance(repos, now=NOW)
        assert result.recently_maintained_projects == 2
        assert result.maintenance_percentage == 40.0
        assert result.projects_with_releases == 1

    def test_custom_window(self):
        repos = [_repo("fresh", pushed_at="2025-12-01T00:00:00Z")]
        assert analyze_maintenance(repos, now=NOW, window_days=30).recently_maintained_projects == 0


class TestPercentagesInRange:
    def test_bounded(self):
        repos = [
            _repo(
                f"r{i}",
                has_readme=True,
                readme_size=1000,
                file_types={".test.js": 1},
                license="MIT",
                pushed_at="2026-01-01",
            )
            for i in range(3)
        ]
        result = score_professional_indicators(repos, now=NOW)
        for value in (
            result.documentation_quality,
            result.testing_practices.testing_percentage,
            result.project_organization.organization_score,
            result.maintenance_commitment.maintenance_percentage,
        ):
            assert 0 <= value <= 100
        assert result.documentation_quality == 100.0

    def test_to_dict_shape(self):
        data = score_professional_indicators([_repo()], now=NOW).to_dict()
        assert set(data) == {
            "documentation_quality",
            "testing_practices",
            "project_organization",
            "collaboration_experience",
            "maintenance_commitment",
        }
        assert data["testing_practices"] == {"repos_with_tests": 0, "testing_percentage": 0.0}
