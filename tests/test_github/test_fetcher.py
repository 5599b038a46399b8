"""Tests for the repository fetcher."""

import pytest

from pubscan.core.errors import DecodeError, FetchError, RefResolutionError
from pubscan.core.models import RepositoryRef
from pubscan.github.client import GitHubClient
from pubscan.github.fetcher import BranchStrategy, RepositoryFetcher

REPO = RepositoryRef("acme", "app")


def _fetcher(strategy: BranchStrategy = BranchStrategy.LATEST) -> RepositoryFetcher:
    return RepositoryFetcher(GitHubClient("ghp_test"), strategy)


class TestResolveLatestBranch:
    """Tests for picking the most recently committed branch."""

    def test_selects_latest_commit(self, github_api, make_branch) -> None:
        github_api.add_branches("acme/app", [
            make_branch("old", "2023-01-01T00:00:00Z"),
            make_branch("feature", "2024-06-01T00:00:00Z"),
            make_branch("main", "2023-12-31T00:00:00Z"),
        ])

        assert _fetcher().resolve_latest_branch(REPO) == "feature"

    def test_tie_keeps_first_branch(self, github_api, make_branch) -> None:
        github_api.add_branches("acme/app", [
            make_branch("main", "2024-06-01T12:00:00Z"),
            make_branch("develop", "2024-06-01T12:00:00Z"),
        ])

        assert _fetcher().resolve_latest_branch(REPO) == "main"

    def test_compares_across_timezones(self, github_api, make_branch) -> None:
        github_api.add_branches("acme/app", [
            make_branch("utc", "2024-06-01T10:00:00Z"),
            make_branch("plus2", "2024-06-01T11:00:00+02:00"),
        ])

        assert _fetcher().resolve_latest_branch(REPO) == "utc"

    def test_looks_up_commit_when_not_inlined(self, github_api) -> None:
        github_api.add_branches("acme/app", [
            {"name": "main", "commit": {"sha": "aaa"}},
            {"name": "next", "commit": {"sha": "bbb"}},
        ])
        github_api.add_json("/repos/acme/app/commits/aaa", {"commit": {"author": {"date": "2024-01-01T00:00:00Z"}}})
        github_api.add_json("/repos/acme/app/commits/bbb", {"commit": {"author": {"date": "2024-02-01T00:00:00Z"}}})

        assert _fetcher().resolve_latest_branch(REPO) == "next"
        assert "/repos/acme/app/commits/bbb" in github_api.paths()

    def test_empty_branch_list(self, github_api) -> None:
        github_api.add_branches("acme/app", [])

        with pytest.raises(RefResolutionError, match="no branches"):
            _fetcher().resolve_latest_branch(REPO)

    def test_branch_listing_error(self, github_api) -> None:
        github_api.add_error("/repos/acme/app/branches", 401)

        with pytest.raises(RefResolutionError, match="401"):
            _fetcher().resolve_latest_branch(REPO)

    def test_no_usable_dates(self, github_api) -> None:
        github_api.add_branches("acme/app", [{"name": "main", "commit": {}}])

        with pytest.raises(RefResolutionError):
            _fetcher().resolve_latest_branch(REPO)


class TestResolveRef:
    """Tests for the branch strategy switch."""

    def test_default_strategy_makes_no_request(self, github_api) -> None:
        assert _fetcher(BranchStrategy.DEFAULT).resolve_ref(REPO) is None
        assert github_api.requests == []

    def test_latest_strategy(self, github_api, make_branch) -> None:
        github_api.add_branches("acme/app", [make_branch("main", "2024-01-01T00:00:00Z")])
        assert _fetcher(BranchStrategy.LATEST).resolve_ref(REPO) == "main"

    def test_from_string(self) -> None:
        assert BranchStrategy.from_string("Default") is BranchStrategy.DEFAULT


class TestFetchManifest:
    """Tests for downloading pubspec.yaml."""

    def test_decodes_base64_content(self, github_api) -> None:
        github_api.add_manifest("acme/app", "name: app\ndependencies:\n  http: ^1.0.0\n")

        data = _fetcher().fetch_manifest(REPO)

        assert data == b"name: app\ndependencies:\n  http: ^1.0.0\n"

    def test_fetches_at_ref(self, github_api) -> None:
        github_api.add_manifest("acme/app", "name: old\n")
        github_api.add_manifest("acme/app", "name: feature\n", ref="feature")

        assert _fetcher().fetch_manifest(REPO, "feature") == b"name: feature\n"

    def test_not_found(self, github_api) -> None:
        with pytest.raises(FetchError, match="not found"):
            _fetcher().fetch_manifest(REPO)

    def test_server_error(self, github_api) -> None:
        github_api.add_error("/repos/acme/app/contents/pubspec.yaml", 502)

        with pytest.raises(FetchError, match="502"):
            _fetcher().fetch_manifest(REPO)

    def test_invalid_base64(self, github_api) -> None:
        github_api.add_json(
            "/repos/acme/app/contents/pubspec.yaml",
            {"type": "file", "encoding": "base64", "content": "not*base64!"},
        )

        with pytest.raises(DecodeError):
            _fetcher().fetch_manifest(REPO)

    def test_unsupported_encoding(self, github_api) -> None:
        github_api.add_json(
            "/repos/acme/app/contents/pubspec.yaml",
            {"type": "file", "encoding": "none", "content": ""},
        )

        with pytest.raises(DecodeError, match="encoding"):
            _fetcher().fetch_manifest(REPO)

    def test_directory_listing(self, github_api) -> None:
        github_api.add_json("/repos/acme/app/contents/pubspec.yaml", [{"name": "x"}])

        with pytest.raises(FetchError, match="not a file"):
            _fetcher().fetch_manifest(REPO)
