"""Core module for pubscan."""

from pubscan.core.config import Config, ConfigLoader
from pubscan.core.errors import (
    ConfigError,
    DecodeError,
    FetchError,
    GitHubError,
    InvalidRepoFormat,
    OutputWriteError,
    PubscanError,
    RefResolutionError,
    RepositoryError,
)
from pubscan.core.models import (
    CollectResult,
    Manifest,
    PackageEntry,
    Report,
    RepositoryRef,
    Section,
    UsageCounters,
)

__all__ = [
    "CollectResult",
    "Config",
    "ConfigError",
    "ConfigLoader",
    "DecodeError",
    "FetchError",
    "GitHubError",
    "InvalidRepoFormat",
    "Manifest",
    "OutputWriteError",
    "PackageEntry",
    "PubscanError",
    "RefResolutionError",
    "Report",
    "RepositoryError",
    "RepositoryRef",
    "Section",
    "UsageCounters",
]
