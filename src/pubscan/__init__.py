"""pubscan - pubspec.yaml dependency usage statistics for GitHub repositories."""

__version__ = "0.1.0"
