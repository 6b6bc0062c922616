"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import ConfigurationError


def env_str(name: str, default: str) -> str:
    """Return a stripped environment value, falling back to ``default`` when blank."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def env_choice(name: str, default: str, choices: frozenset[str]) -> str:
    value = env_str(name, default).lower()
    if value not in choices:
        allowed = ", ".join(sorted(choices))
        raise ConfigurationError(f"Invalid value for {name}: {value!r} (expected one of {allowed})")
    return value


def env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Return a comma separated environment value as a tuple of non-empty items."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    if not items:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}")
    return items
