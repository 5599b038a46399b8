"""Parser for pubspec.yaml manifests."""

from typing import Any

import yaml

from pubscan.core.errors import DecodeError
from pubscan.core.models import Manifest, Section


class PubspecParser:
    """Decode pubspec.yaml content into a Manifest.

    Unknown top-level keys are ignored and absent or null sections decode to
    empty mappings. Dependency values are never interpreted.
    """

    def parse(self, data: bytes | str) -> Manifest:
        """Parse manifest content.

        Args:
            data: Raw file content, as bytes (UTF-8) or text.

        Returns:
            Manifest with the three dependency sections.

        Raises:
            DecodeError: If the content is not valid UTF-8 or YAML, or the
                document does not have the shape of a pubspec.
        """
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"pubspec.yaml is not valid UTF-8: {e}") from e

        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise DecodeError(f"failed to parse yaml: {e}") from e

        if document is None:
            return Manifest()
        if not isinstance(document, dict):
            raise DecodeError(
                f"pubspec.yaml root must be a mapping, got {type(document).__name__}"
            )

        return Manifest(
            **{s.value: self._parse_section(document, s) for s in Section}
        )

    def _parse_section(self, document: dict, section: Section) -> dict[str, Any]:
        value = document.get(section.value)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise DecodeError(
                f"{section.value} must be a mapping, got {type(value).__name__}"
            )
        # YAML allows non-string keys (e.g. `1: any`)
        return {str(k): v for k, v in value.items() if k is not None and str(k)}
