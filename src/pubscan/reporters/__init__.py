"""Reporters module for pubscan."""

from pubscan.reporters.json_reporter import JSONReporter
from pubscan.reporters.terminal import TerminalReporter

__all__ = ["JSONReporter", "TerminalReporter"]
