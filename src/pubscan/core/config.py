"""Configuration loading for pubscan."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

from pubscan.core.errors import ConfigError, InvalidRepoFormat
from pubscan.core.models import RepositoryRef

TOKEN_KEY = "GITHUB_TOKEN"
BRANCH_STRATEGIES = ("latest", "default")


@dataclass
class Config:
    """Settings for a collection run."""

    limit: int = 5
    min_usage: int = 1
    delay: float = 0.2
    timeout: float = 10.0
    branch_strategy: str = "latest"
    api_url: str = "https://api.github.com"
    reference_url: str = "https://pub.dev/packages/{name}"

    def validate(self) -> None:
        """Raise ConfigError if any value is out of range."""
        if self.limit < 1:
            raise ConfigError(f"limit must be at least 1, got {self.limit}")
        if self.min_usage < 1:
            raise ConfigError(f"min_usage must be at least 1, got {self.min_usage}")
        if self.delay < 0:
            raise ConfigError(f"delay must not be negative, got {self.delay}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.branch_strategy not in BRANCH_STRATEGIES:
            raise ConfigError(
                f"branch_strategy must be one of {', '.join(BRANCH_STRATEGIES)}, "
                f"got {self.branch_strategy!r}"
            )
        if "{name}" not in self.reference_url:
            raise ConfigError("reference_url must contain a {name} placeholder")
        try:
            self.reference_url.format(name="package")
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ConfigError(
                f"reference_url may only use the {{name}} placeholder: {e!r}"
            ) from e


class ConfigLoader:
    """Load configuration from global and project config files."""

    CONFIG_NAMES = [".pubscan.yml", ".pubscan.yaml"]
    GLOBAL_CONFIG_NAMES = ["config.yml", "config.yaml"]

    def __init__(self, global_config_dir: Path | None = None) -> None:
        self.global_config_dir = global_config_dir or Path.home() / ".pubscan"

    def load(self, project_dir: Path) -> Config:
        """Load config, project values overriding global ones.

        Args:
            project_dir: Directory searched for ``.pubscan.yml``.

        Returns:
            The merged, validated Config.
        """
        data: dict[str, Any] = {}

        global_file = self._find_file(self.global_config_dir, self.GLOBAL_CONFIG_NAMES)
        if global_file is not None:
            data.update(self._read_file(global_file))

        project_file = self._find_file(project_dir, self.CONFIG_NAMES)
        if project_file is not None:
            data.update(self._read_file(project_file))

        return self._build(data)

    def load_from_file(self, config_file: Path) -> Config:
        """Load config from an explicit file, ignoring global config."""
        if not config_file.is_file():
            raise ConfigError(f"Config file not found: {config_file}")
        return self._build(self._read_file(config_file))

    def _find_file(self, directory: Path, names: list[str]) -> Path | None:
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def _read_file(self, config_file: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(config_file.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config {config_file}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config {config_file} must be a mapping")
        return data

    def _build(self, data: dict[str, Any]) -> Config:
        defaults = {f.name: f.default for f in fields(Config)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            # Unknown keys are ignored
            if key not in defaults:
                continue
            values[key] = self._coerce(key, value, defaults[key])

        config = Config(**values)
        config.validate()
        return config

    def _coerce(self, key: str, value: Any, default: Any) -> Any:
        expected = type(default)
        if expected is float and isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"Config value {key} must be {expected.__name__}, got {value!r}"
            )
        return value


def load_token(env_file: Path) -> str:
    """Read the GitHub token from a dotenv-style file.

    Raises:
        ConfigError: If the file is missing or does not define a token.
    """
    if not env_file.is_file():
        raise ConfigError(f"Env file not found: {env_file}")

    token = dotenv_values(env_file).get(TOKEN_KEY)
    if not token or not token.strip():
        raise ConfigError(f"{TOKEN_KEY} not found in env file {env_file}")
    return token.strip()


def parse_repositories(
    text: str,
) -> tuple[list[RepositoryRef], list[str], list[RepositoryRef]]:
    """Parse a whitespace-separated list of ``owner/name`` entries.

    Lines starting with ``#`` are comments. A repository listed more than
    once is kept at its first position only, so each is counted once.

    Returns:
        Tuple of (unique valid repositories in input order, rejected
        entries, repeated repositories that were dropped).
    """
    repos: list[RepositoryRef] = []
    invalid: list[str] = []
    duplicates: list[RepositoryRef] = []
    seen: set[tuple[str, str]] = set()

    for line in text.splitlines():
        line = line.split("#", 1)[0]
        for entry in line.split():
            try:
                repo = RepositoryRef.parse(entry)
            except InvalidRepoFormat:
                invalid.append(entry)
                continue
            # GitHub owner and repository names are case-insensitive
            key = (repo.owner.lower(), repo.name.lower())
            if key in seen:
                duplicates.append(repo)
                continue
            seen.add(key)
            repos.append(repo)

    return repos, invalid, duplicates


def read_repositories(
    repos_file: Path,
) -> tuple[list[RepositoryRef], list[str], list[RepositoryRef]]:
    """Read and parse a repository list file."""
    try:
        text = repos_file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read repos file {repos_file}: {e}") from e
    return parse_repositories(text)
