"""Parsers module for pubscan."""

from pubscan.parsers.pubspec import PubspecParser

__all__ = ["PubspecParser"]
