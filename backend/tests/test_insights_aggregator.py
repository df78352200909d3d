"""Tests for insights aggregation and repository highlights."""

from datetime import UTC, datetime

import pytest

from app.config import Settings
from services.insights_aggregator import (
    generate_insights,
    most_contributed,
    most_starred,
    project_type_census,
    recently_updated,
    top_topics,
)
from services.snapshot import RepositorySnapshot
from services.tech_registry import TechnologyRegistry

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def _repo(name: str = "repo", **fields) -> RepositorySnapshot:
    return RepositorySnapshot(name=name, **fields)


def _generate(repos, language_bytes=None, **settings_overrides):
    return generate_insights(
        repos,
        language_bytes,
        registry=TechnologyRegistry(),
        now=NOW,
        settings=Settings(**settings_overrides),
    )


class TestScenario:
    """API server, React web app and a fork scanned together."""

    @pytest.fixture
    def insights(self, scenario_repos):
        return _generate([RepositorySnapshot.model_validate(r) for r in scenario_repos])

    def test_react_detected_once(self, insights):
        react = insights.technology_stack.get("frameworks")["React"]
        assert react.project_count == 1
        assert react.projects == ("web-app",)

    def test_single_api_repository_is_not_api_first(self, insights):
        assert "API-First" not in insights.technology_stack.architectural_patterns
        assert "Full-Stack" in insights.technology_stack.architectural_patterns

    def test_documentation_quality(self, insights):
        assert insights.professional_indicators.documentation_quality == 33.3

    def test_totals(self, insights):
        assert insights.total_stars_earned == 15
        assert insights.total_forks == 0
        assert insights.total_contributions == 3
        assert insights.well_documented_projects == 1

    def test_primary_languages_ordered_by_bytes(self, insights):
        assert list(insights.primary_languages) == ["JavaScript", "Go"]
        assert insights.primary_languages["Go"].experience_level == "Intermediate"

    def test_external_contribution(self, insights):
        assert [c.to_dict() for c in insights.contributed_to_external] == [
            {"name": "old-fork", "contributions": 3}
        ]
        roles = {r.name: r.role for r in insights.most_contributed_repos}
        assert roles["old-fork"] == "Contributor"
        assert roles["api-server"] == "Owner"


class TestRankings:
    """Highlight lists are stable and bounded."""

    def test_most_starred_ties_keep_input_order(self):
        repos = [_repo("a", stars=3), _repo("b", stars=7), _repo("c", stars=3), _repo("d")]
        assert [r.name for r in most_starred(repos)] == ["b", "a", "c", "d"]

    def test_most_starred_limit(self):
        repos = [_repo(f"r{i}", stars=i) for i in range(8)]
        assert [r.name for r in most_starred(repos, limit=3)] == ["r7", "r6", "r5"]

    def test_most_contributed(self):
        repos = [_repo("a", user_contributions=1), _repo("b", user_contributions=9)]
        assert [r.name for r in most_contributed(repos)] == ["b", "a"]

    def test_recently_updated_unknown_last(self):
        repos = [
            _repo("old", pushed_at="2024-05-01T00:00:00Z"),
            _repo("unknown"),
            _repo("new", pushed_at="2025-01-01T10:00:00Z"),
            _repo("junk", pushed_at="not a date"),
        ]
        ranked = recently_updated(repos)
        assert [r.name for r in ranked] == ["new", "old", "unknown", "junk"]
        assert ranked[0].last_updated == "2025-01-01T10:00:00Z"

    def test_top_topics_ties_keep_first_seen(self):
        topics = {"zeta": 2, "alpha": 2, "beta": 5, "gamma": 1}
        assert list(top_topics(topics, limit=3)) == ["beta", "zeta", "alpha"]

    def test_project_type_census(self):
        repos = [
            _repo("a", topics=["web", "cli"]),
            _repo("b", topics=["frontend", "webapp"]),
            _repo("c", topics=["machine-learning"]),
        ]
        assert project_type_census(repos) == {
            "web_apps": 2,
            "libraries": 0,
            "tools": 1,
            "data_science": 1,
            "mobile": 0,
        }


class TestGenerateInsights:
    """Tests for generate_insights."""

    def test_empty_input(self):
        insights = _generate([])
        assert insights.total_stars_earned == 0
        assert insights.career_span is None
        assert insights.commit_frequency is None
        assert insights.primary_languages == {}
        assert insights.most_starred_repos == ()
        data = insights.to_dict()
        assert data["career_span"] == {}
        assert data["commit_frequency"] == {}
        assert data["technology_stack"] == {}
        assert data["coding_activity"]["consistency_score"] == 0

    def test_language_bytes_override(self):
        repos = [_repo("a", language="Go", languages={"Go": 500})]
        insights = _generate(repos, {"Rust": 150000})
        assert list(insights.primary_languages) == ["Rust"]
        assert insights.primary_languages["Rust"].project_count == 0
        assert insights.primary_languages["Rust"].percentage == 100.0

    def test_settings_limits(self):
        repos = [_repo(f"r{i}", stars=i, topics=[f"t{i}"]) for i in range(6)]
        insights = _generate(repos, highlight_limit=2, topic_limit=3)
        assert [r.name for r in insights.most_starred_repos] == ["r5", "r4"]
        assert len(insights.recently_updated) == 2
        assert list(insights.expertise_areas) == ["t0", "t1", "t2"]

    def test_input_not_mutated(self):
        repos = [_repo("b", stars=1), _repo("a", stars=5)]
        snapshot = list(repos)
        _generate(repos)
        assert repos == snapshot

    def test_counts(self):
        repos = [
            _repo("a", has_readme=True, license="MIT", total_contributors=3, total_releases=1),
            _repo("b", has_readme=True, total_contributors=1),
            _repo("c", important_files=["LICENSE"]),
        ]
        insights = _generate(repos)
        assert insights.well_documented_projects == 1
        assert insights.projects_with_contributors == 1
        assert insights.projects_with_releases == 1

    def test_to_dict_is_plain_data(self):
        repos = [
            _repo(
                "api",
                description="REST api",
                created_at="2020-01-01",
                last_commit="2024-06-01",
                commit_dates=["2024-06-01"],
                topics=["backend"],
            ),
            _repo("graph", description="graphql gateway", topics=["backend"]),
        ]
        data = _generate(repos).to_dict()
        assert data["generated_at"] == NOW.isoformat()
        assert data["career_span"]["start_date"] == "2020-01"
        assert data["commit_frequency"]["commits_per_month"] == {"2024-06": 1}
        assert data["technology_stack"]["architectural_patterns"] == ["API-First"]
        assert data["expertise_areas"] == {"backend": 2}
        assert data["project_types"]["web_apps"] == 2

    def test_mappings_are_read_only(self):
        insights = _generate([_repo("a", languages={"Go": 10}, topics=["cli"])])
        with pytest.raises(TypeError):
            insights.primary_languages["Rust"] = insights.primary_languages["Go"]
        with pytest.raises(TypeError):
            insights.expertise_areas["cli"] = 99
        with pytest.raises(TypeError):
            insights.technology_stack.categories["frameworks"] = {}
        assert insights.to_dict()["expertise_areas"] == {"cli": 1}
