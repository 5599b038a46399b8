"""Core data models for pubscan."""

import threading
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pubscan.core.errors import InvalidRepoFormat


class Section(str, Enum):
    """Dependency sections of a pubspec.yaml manifest."""

    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "dev_dependencies"
    DEPENDENCY_OVERRIDES = "dependency_overrides"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RepositoryRef:
    """A GitHub repository identified by owner and name."""

    owner: str
    name: str

    @classmethod
    def parse(cls, text: str) -> "RepositoryRef":
        """Parse an ``owner/name`` string.

        Raises:
            InvalidRepoFormat: If the text does not have exactly two
                non-empty slash-separated parts.
        """
        parts = text.strip().split("/")
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise InvalidRepoFormat(f"invalid repo format: {text!r}")
        return cls(owner=parts[0].strip(), name=parts[1].strip())

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class Manifest:
    """Parsed view of a pubspec.yaml file.

    Only the keys of each section matter; values (version constraints,
    git/path/sdk specs) are kept as-is and never interpreted.
    """

    dependencies: dict[str, Any] = field(default_factory=dict)
    dev_dependencies: dict[str, Any] = field(default_factory=dict)
    dependency_overrides: dict[str, Any] = field(default_factory=dict)

    def section(self, section: Section) -> dict[str, Any]:
        """Return the mapping for a section."""
        return getattr(self, section.value)

    def package_names(self, section: Section) -> set[str]:
        """Return the package names declared in a section."""
        return set(self.section(section))

    @property
    def is_empty(self) -> bool:
        return not any(self.section(s) for s in Section)

    @property
    def package_count(self) -> int:
        """Number of declarations across all sections."""
        return sum(len(self.section(s)) for s in Section)


class UsageCounters:
    """Per-section usage counts shared between concurrent collection tasks.

    Every mutation goes through ``record`` and happens under a single lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[Section, Counter[str]] = {s: Counter() for s in Section}

    def record(self, manifest: Manifest) -> None:
        """Count every package of every section of a manifest once."""
        names = {s: manifest.package_names(s) for s in Section}
        with self._lock:
            for section, section_names in names.items():
                self._counts[section].update(section_names)

    def count(self, section: Section, name: str) -> int:
        with self._lock:
            return self._counts[section][name]

    def section(self, section: Section) -> dict[str, int]:
        """Return a copy of the counts for a section."""
        with self._lock:
            return dict(self._counts[section])

    def as_dict(self) -> dict[str, dict[str, int]]:
        with self._lock:
            return {s.value: dict(c) for s, c in self._counts.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UsageCounters):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"UsageCounters({self.as_dict()!r})"


@dataclass(frozen=True)
class PackageEntry:
    """A package in the report with its usage count and reference URL."""

    count: int
    reference_url: str

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "url": self.reference_url}


@dataclass
class Report:
    """Aggregated usage report, keyed by section then package name."""

    sections: dict[Section, dict[str, PackageEntry]] = field(
        default_factory=lambda: {s: {} for s in Section}
    )

    def section(self, section: Section) -> dict[str, PackageEntry]:
        return self.sections.get(section, {})

    @property
    def total_packages(self) -> int:
        """Number of entries across all sections."""
        return sum(len(entries) for entries in self.sections.values())

    def to_dict(self) -> dict[str, dict[str, dict[str, Any]]]:
        return {
            s.value: {name: entry.to_dict() for name, entry in self.section(s).items()}
            for s in Section
        }


@dataclass
class CollectResult:
    """Outcome of collecting manifests from a list of repositories."""

    counters: UsageCounters
    repositories: list[RepositoryRef] = field(default_factory=list)
    succeeded: list[RepositoryRef] = field(default_factory=list)
    failed: list[RepositoryRef] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    elapsed_ms: float = 0

    @property
    def has_failures(self) -> bool:
        return len(self.failed) > 0
