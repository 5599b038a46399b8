"""GitHub access for pubscan."""

from pubscan.github.client import GitHubClient
from pubscan.github.fetcher import BranchStrategy, RepositoryFetcher

__all__ = ["BranchStrategy", "GitHubClient", "RepositoryFetcher"]
