"""Engine registry – resolve a BuildEngine by name."""

from __future__ import annotations

from typing import Callable

from .base import BuildEngine
from .static import StaticBuildEngine

_ENGINES: dict[str, Callable[[], BuildEngine]] = {
    "static": StaticBuildEngine,
}


def get_engine(name: str = "static") -> BuildEngine:
    """Return a new engine instance for *name*."""
    factory = _ENGINES.get((name or "").strip().lower())
    if factory is None:
        raise ValueError(f"No build engine registered under: {name}")
    return factory()


def register_engine(name: str, factory: Callable[[], BuildEngine]) -> None:
    """Make an engine available to ``get_engine`` and the CLI."""
    _ENGINES[name.strip().lower()] = factory
