"""Minimal GitHub REST API client."""

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from pubscan import __version__
from pubscan.core.errors import GitHubError


class GitHubClient:
    """Authenticated read-only access to the GitHub REST API."""

    DEFAULT_API_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 10.0
    API_VERSION = "2022-11-28"
    PER_PAGE = 100

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send a GET request and decode the JSON body.

        Args:
            path: API path starting with ``/``.
            params: Optional query parameters.

        Returns:
            The decoded JSON document.

        Raises:
            GitHubError: On HTTP errors, network errors, timeouts, or a body
                that is not valid JSON.
        """
        url = f"{self.api_url}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"

        request = urllib.request.Request(url, headers=self._headers(), method="GET")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                body = response.read()
        except urllib.error.HTTPError as e:
            raise GitHubError(self._describe_http_error(e), status=e.code) from e
        except urllib.error.URLError as e:
            raise GitHubError(f"request to {path} failed: {e.reason}") from e
        except TimeoutError as e:
            raise GitHubError(f"request to {path} timed out") from e
        except OSError as e:
            raise GitHubError(f"request to {path} failed: {e}") from e

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise GitHubError(f"invalid JSON from {path}: {e}") from e

    def list_branches(self, owner: str, name: str) -> list[dict[str, Any]]:
        """List all branches of a repository, in API order."""
        path = f"/repos/{self._quote(owner)}/{self._quote(name)}/branches"
        branches: list[dict[str, Any]] = []
        page = 1

        while True:
            batch = self.get_json(path, {"per_page": self.PER_PAGE, "page": page})
            if not isinstance(batch, list):
                raise GitHubError(f"unexpected branch listing for {owner}/{name}")
            branches.extend(batch)
            if len(batch) < self.PER_PAGE:
                return branches
            page += 1

    def get_commit(self, owner: str, name: str, sha: str) -> dict[str, Any]:
        """Get a single commit."""
        path = (
            f"/repos/{self._quote(owner)}/{self._quote(name)}"
            f"/commits/{self._quote(sha)}"
        )
        return self.get_json(path)

    def get_contents(
        self, owner: str, name: str, file_path: str, ref: str | None = None
    ) -> Any:
        """Get the contents entry of a file, optionally at a given ref."""
        path = (
            f"/repos/{self._quote(owner)}/{self._quote(name)}"
            f"/contents/{urllib.parse.quote(file_path)}"
        )
        params = {"ref": ref} if ref else None
        return self.get_json(path, params)

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "X-GitHub-Api-Version": self.API_VERSION,
            "User-Agent": f"pubscan/{__version__}",
        }

    def _describe_http_error(self, error: urllib.error.HTTPError) -> str:
        message = f"HTTP {error.code} {error.reason}"
        headers = error.headers
        if (
            error.code in (403, 429)
            and headers is not None
            and headers.get("X-RateLimit-Remaining") == "0"
        ):
            message += " (rate limit exceeded)"
        return message

    @staticmethod
    def _quote(segment: str) -> str:
        return urllib.parse.quote(segment, safe="")
