"""Pytest configuration and fixtures."""

import base64
import json
import threading
import urllib.error
import urllib.parse
import urllib.request
from email.message import Message
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest


class FakeGitHubAPI:
    """In-memory stand-in for the GitHub REST API behind urllib.request.urlopen.

    Routes are keyed by URL path and the ``ref`` query parameter.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str | None], tuple[int, Any]] = {}
        self.requests: list[urllib.request.Request] = []
        self._lock = threading.Lock()

    def add_json(self, path: str, payload: Any, ref: str | None = None) -> None:
        self.routes[(path, ref)] = (200, payload)

    def add_error(self, path: str, status: int, ref: str | None = None) -> None:
        self.routes[(path, ref)] = (status, None)

    def add_manifest(self, repo: str, text: str, ref: str | None = None) -> None:
        content = base64.encodebytes(text.encode("utf-8")).decode("ascii")
        self.add_json(
            f"/repos/{repo}/contents/pubspec.yaml",
            {"type": "file", "encoding": "base64", "content": content},
            ref=ref,
        )

    def add_branches(self, repo: str, branches: list[dict[str, Any]]) -> None:
        self.add_json(f"/repos/{repo}/branches", branches)

    def paths(self) -> list[str]:
        return [urllib.parse.urlsplit(r.full_url).path for r in self.requests]

    def urlopen(self, request: urllib.request.Request, timeout: float | None = None) -> MagicMock:
        with self._lock:
            self.requests.append(request)

        url = urllib.parse.urlsplit(request.full_url)
        query = urllib.parse.parse_qs(url.query)
        ref = query.get("ref", [None])[0]

        # Only the first page of a listing is routed
        if query.get("page", ["1"])[0] != "1":
            return _response([])

        route = self.routes.get((url.path, ref))
        if route is None:
            raise urllib.error.HTTPError(request.full_url, 404, "Not Found", Message(), None)

        status, payload = route
        if status != 200:
            raise urllib.error.HTTPError(request.full_url, status, "Error", Message(), None)
        return _response(payload)


def _response(payload: Any) -> MagicMock:
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode()
    response.__enter__ = MagicMock(return_value=response)
    response.__exit__ = MagicMock(return_value=False)
    return response


def branch(name: str, date: str) -> dict[str, Any]:
    """A branch listing entry with an inlined commit author date."""
    return {"name": name, "commit": {"sha": f"sha-{name}", "commit": {"author": {"date": date}}}}


@pytest.fixture
def github_api():
    """Patch urllib.request.urlopen with a FakeGitHubAPI."""
    api = FakeGitHubAPI()
    with patch("urllib.request.urlopen", new=api.urlopen):
        yield api


@pytest.fixture
def make_branch():
    return branch


@pytest.fixture
def env_file(tmp_path: Path) -> Path:
    """Create an env file with a GitHub token."""
    file = tmp_path / ".env"
    file.write_text("GITHUB_TOKEN=ghp_test123\n")
    return file
