"""Tests for the JSON reporter."""

import json
from pathlib import Path

import pytest

from pubscan.core.errors import OutputWriteError
from pubscan.core.models import Manifest, UsageCounters
from pubscan.core.report import build_report
from pubscan.reporters.json_reporter import JSONReporter


def _report():
    counters = UsageCounters()
    counters.record(Manifest(dependencies={"http": "^1.0", "provider": "^6.0"}))
    counters.record(Manifest(dependencies={"http": "^1.0"}, dev_dependencies={"test": "any"}))
    return build_report(counters)


def test_render_shape():
    data = json.loads(JSONReporter().render(_report()))

    assert data == {
        "dependencies": {
            "http": {"count": 2, "url": "https://pub.dev/packages/http"},
            "provider": {"count": 1, "url": "https://pub.dev/packages/provider"},
        },
        "dev_dependencies": {
            "test": {"count": 1, "url": "https://pub.dev/packages/test"},
        },
        "dependency_overrides": {},
    }


def test_render_uses_two_space_indent():
    rendered = JSONReporter().render(_report())

    assert rendered.startswith('{\n  "dependencies": {\n    "http"')
    assert rendered.endswith("}\n")


def test_write_creates_parent_dirs(tmp_path: Path):
    out = tmp_path / "nested" / "stats.json"

    JSONReporter().write(_report(), out)

    assert json.loads(out.read_text(encoding="utf-8"))["dependencies"]["http"]["count"] == 2


def test_write_failure(tmp_path: Path):
    # A directory cannot be written as a file
    with pytest.raises(OutputWriteError):
        JSONReporter().write(_report(), tmp_path)
