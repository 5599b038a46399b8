"""Exception hierarchy for pubscan."""


class PubscanError(Exception):
    """Base class for all pubscan errors."""


class ConfigError(PubscanError):
    """Invalid or missing configuration (flags, env file, repo list)."""


class OutputWriteError(PubscanError):
    """The report could not be serialized or written."""


class GitHubError(PubscanError):
    """A request to the GitHub API failed.

    Attributes:
        status: HTTP status code, or None for network errors and timeouts.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def not_found(self) -> bool:
        return self.status == 404


class RepositoryError(PubscanError):
    """A failure confined to a single repository; it is logged and skipped."""


class InvalidRepoFormat(RepositoryError):
    """A repository entry is not of the form ``owner/name``."""


class RefResolutionError(RepositoryError):
    """The branch to fetch could not be determined."""


class FetchError(RepositoryError):
    """The manifest could not be downloaded."""


class DecodeError(RepositoryError):
    """The manifest content could not be decoded (base64, UTF-8 or YAML)."""
