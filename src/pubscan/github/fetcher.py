"""Download pubspec.yaml manifests from GitHub repositories."""

import base64
import binascii
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pubscan.core.errors import (
    DecodeError,
    FetchError,
    GitHubError,
    RefResolutionError,
)
from pubscan.core.models import RepositoryRef
from pubscan.github.client import GitHubClient


class BranchStrategy(str, Enum):
    """How the branch to read the manifest from is chosen."""

    LATEST = "latest"
    DEFAULT = "default"

    @classmethod
    def from_string(cls, value: str) -> "BranchStrategy":
        return cls(value.lower())


class RepositoryFetcher:
    """Resolve the ref to read and fetch the manifest at that ref."""

    MANIFEST_PATH = "pubspec.yaml"

    def __init__(
        self,
        client: GitHubClient,
        strategy: BranchStrategy = BranchStrategy.LATEST,
    ) -> None:
        self.client = client
        self.strategy = strategy

    def resolve_ref(self, repo: RepositoryRef) -> str | None:
        """Return the ref to fetch, or None for the repository's default branch."""
        if self.strategy == BranchStrategy.DEFAULT:
            return None
        return self.resolve_latest_branch(repo)

    def resolve_latest_branch(self, repo: RepositoryRef) -> str:
        """Return the branch whose head commit has the latest author date.

        Branches are compared with a strict "greater than", so on equal
        timestamps the branch listed first by the API wins.

        Raises:
            RefResolutionError: If the branch list cannot be fetched, is
                empty, or no branch has a usable commit date.
        """
        try:
            branches = self.client.list_branches(repo.owner, repo.name)
        except GitHubError as e:
            raise RefResolutionError(f"failed to list branches: {e}") from e

        if not branches:
            raise RefResolutionError("repository has no branches")

        latest_name: str | None = None
        latest_date: datetime | None = None

        for branch in branches:
            name = branch.get("name")
            if not name:
                continue
            date = self._branch_commit_date(repo, branch)
            if date is None:
                continue
            if latest_date is None or date > latest_date:
                latest_name, latest_date = name, date

        if latest_name is None:
            raise RefResolutionError("no branch has a commit date")
        return latest_name

    def fetch_manifest(self, repo: RepositoryRef, ref: str | None = None) -> bytes:
        """Download and decode pubspec.yaml from the repository root.

        Args:
            repo: Repository to read from.
            ref: Branch or commit; None reads the default branch.

        Returns:
            The raw manifest bytes.

        Raises:
            FetchError: If the file is missing or the request fails.
            DecodeError: If the returned content is not valid base64.
        """
        try:
            entry = self.client.get_contents(
                repo.owner, repo.name, self.MANIFEST_PATH, ref=ref
            )
        except GitHubError as e:
            if e.not_found:
                at = f" at {ref}" if ref else ""
                raise FetchError(f"{self.MANIFEST_PATH} not found{at}") from e
            raise FetchError(f"failed to fetch {self.MANIFEST_PATH}: {e}") from e

        if not isinstance(entry, dict) or entry.get("type", "file") != "file":
            raise FetchError(f"{self.MANIFEST_PATH} is not a file")

        content = entry.get("content")
        if content is None:
            raise FetchError(f"no content returned for {self.MANIFEST_PATH}")

        encoding = entry.get("encoding", "base64")
        if encoding != "base64":
            raise DecodeError(f"unsupported content encoding: {encoding}")

        try:
            # GitHub wraps base64 content at 60 characters
            return base64.b64decode("".join(content.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"failed to decode {self.MANIFEST_PATH}: {e}") from e

    def _branch_commit_date(
        self, repo: RepositoryRef, branch: dict[str, Any]
    ) -> datetime | None:
        """Author date of a branch head, looked up by sha if not inlined."""
        commit = branch.get("commit") or {}
        raw = _author_date(commit)

        if raw is None and commit.get("sha"):
            try:
                full = self.client.get_commit(repo.owner, repo.name, commit["sha"])
            except GitHubError as e:
                raise RefResolutionError(
                    f"failed to get commit for branch {branch.get('name')}: {e}"
                ) from e
            raw = _author_date(full)

        return _parse_timestamp(raw)


def _author_date(commit: dict[str, Any]) -> str | None:
    details = commit.get("commit") or {}
    author = details.get("author") or {}
    return author.get("date")


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # Date-only or naive timestamps are taken as UTC
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
