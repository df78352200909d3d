"""Tests for repository selection before analysis."""

import pytest
from pydantic import ValidationError

from services.repository_filter import RepositoryFilter, filter_repositories
from services.snapshot import RepositorySnapshot


def _repo(name: str = "repo", **fields) -> RepositorySnapshot:
    return RepositorySnapshot(name=name, **fields)


@pytest.fixture
def repos() -> list[RepositorySnapshot]:
    return [
        _repo("tool", language="Go", stars=4),
        _repo("fork", language="Python", stars=40, is_fork=True),
        _repo("legacy", language="Python", stars=12, is_archived=True),
        _repo("lib", language="Python", stars=4),
        _repo("notes"),
    ]


class TestFilterRepositories:
    """Test suite for filter_repositories."""

    def test_default_sorts_by_stars(self, repos):
        result = filter_repositories(repos)
        assert [r.name for r in result] == ["fork", "legacy", "tool", "lib", "notes"]

    def test_skip_forks_and_archived(self, repos):
        criteria = RepositoryFilter(skip_forks=True, skip_archived=True)
        assert [r.name for r in filter_repositories(repos, criteria)] == ["tool", "lib", "notes"]

    def test_language_exact_match(self, repos):
        criteria = RepositoryFilter(language="Python")
        assert [r.name for r in filter_repositories(repos, criteria)] == ["fork", "legacy", "lib"]
        assert filter_repositories(repos, RepositoryFilter(language="python")) == []

    def test_min_stars_treats_unknown_as_zero(self, repos):
        criteria = RepositoryFilter(min_stars=5)
        assert [r.name for r in filter_repositories(repos, criteria)] == ["fork", "legacy"]

    def test_limit_applied_after_sort(self, repos):
        criteria = RepositoryFilter(skip_forks=True, limit=2)
        assert [r.name for r in filter_repositories(repos, criteria)] == ["legacy", "tool"]

    def test_input_untouched(self, repos):
        before = list(repos)
        filter_repositories(repos, RepositoryFilter(limit=1))
        assert repos == before


class TestRepositoryFilterModel:
    def test_rejects_negative_min_stars(self):
        with pytest.raises(ValidationError):
            RepositoryFilter(min_stars=-1)

    def test_rejects_zero_limit(self):
        with pytest.raises(ValidationError):
            RepositoryFilter(limit=0)
