"""Errors raised while reading settings from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment variable is set but cannot be used (bad mode, bbox, language list)."""
