"""CLI module for pubscan."""
