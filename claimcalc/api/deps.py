"""Shared FastAPI dependencies."""

from __future__ import annotations

import functools

from claimcalc.core import IncentiveEngine

# Populated at startup by create_app().
_config_path: str | None = None


def set_config_path(path: str | None) -> None:
    """Override the config path used by get_engine.

    Args:
        path: Path to a claimcalc YAML file, or None for defaults.
    """
    global _config_path  # noqa: PLW0603
    _config_path = path
    get_engine.cache_clear()


@functools.lru_cache(maxsize=1)
def get_engine() -> IncentiveEngine:
    """Return a cached IncentiveEngine instance.

    Returns:
        Configured IncentiveEngine.

    Raises:
        FileNotFoundError: If the config file is missing.
    """
    return IncentiveEngine(_config_path)
