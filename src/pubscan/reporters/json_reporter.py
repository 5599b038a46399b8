"""JSON reporter for usage reports."""

import json
from pathlib import Path

from pubscan.core.errors import OutputWriteError
from pubscan.core.models import Report


class JSONReporter:
    """Serialize a Report to pretty-printed JSON.

    The document always has the three keys ``dependencies``,
    ``dev_dependencies`` and ``dependency_overrides``, each mapping a
    package name to ``{"count": int, "url": str}``.
    """

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render(self, report: Report) -> str:
        """Return the JSON document, newline-terminated."""
        return json.dumps(report.to_dict(), indent=self.indent, ensure_ascii=False) + "\n"

    def write(self, report: Report, out_path: Path) -> None:
        """Write the report to a file as UTF-8.

        Raises:
            OutputWriteError: If the report cannot be serialized or written.
        """
        try:
            content = self.render(report)
        except (TypeError, ValueError) as e:
            raise OutputWriteError(f"Failed to serialize report: {e}") from e

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(f"Failed to write {out_path}: {e}") from e
