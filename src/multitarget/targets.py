"""Build target definitions.

A target is a named variant of the same source tree (e.g. ``modern`` and
``legacy``) that differs only in its transform options and, optionally, in
its plugin list.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from .errors import ConfigurationError


DEFAULT_LEGACY_KEY = "legacy"


@dataclass
class BuildTarget:
    """One build variant."""

    key: str
    transform_options: Any = field(default_factory=dict)
    plugin_factory: Optional[Callable[[], list]] = None
    legacy: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "BuildTarget":
        """Create a BuildTarget from a dictionary.

        ``plugins`` may be a callable or an ``module:function`` reference.
        """
        factory = data.get("plugins", data.get("plugin_factory"))
        if isinstance(factory, str):
            factory = _import_factory(factory)
        return cls(
            key=data.get("key") or "",
            transform_options=data.get("options", data.get("transform_options", {})),
            plugin_factory=factory,
            legacy=bool(data.get("legacy", False)),
        )


def _import_factory(ref: str) -> Callable[[], list]:
    module_name, _, attr = ref.partition(":")
    if not module_name or not attr:
        raise ConfigurationError(f"Plugin factory reference must look like 'module:function', got {ref!r}")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot import plugin factory {ref!r}: {e}") from e


def validate_targets(targets: Iterable[BuildTarget]) -> list[BuildTarget]:
    """Check a target list before any build work starts."""
    targets = list(targets)
    if not targets:
        raise ConfigurationError("Must provide at least one build target")

    seen: set[str] = set()
    for target in targets:
        key = target.key
        if not isinstance(key, str) or not key.strip():
            raise ConfigurationError("BuildTarget.key is required")
        if key in seen:
            raise ConfigurationError(f"Duplicate build target key: {key}")
        seen.add(key)
        if target.plugin_factory is not None and not callable(target.plugin_factory):
            raise ConfigurationError(f"BuildTarget.plugin_factory must be callable (target {key!r})")
    return targets


def parse_targets(raw: Iterable[Any]) -> list[BuildTarget]:
    """Coerce dicts to BuildTarget; existing BuildTarget instances pass through."""
    parsed = []
    for item in raw or []:
        if isinstance(item, BuildTarget):
            parsed.append(item)
        elif isinstance(item, dict):
            parsed.append(BuildTarget.from_dict(item))
        else:
            raise ConfigurationError(f"Invalid build target: {item!r}")
    return parsed


def legacy_keys(targets: Iterable[BuildTarget]) -> frozenset[str]:
    """Keys of the fallback targets.

    Targets flagged ``legacy`` win; without any flag a target keyed
    ``legacy`` is the fallback.
    """
    targets = list(targets)
    flagged = frozenset(t.key for t in targets if t.legacy)
    if flagged:
        return flagged
    return frozenset(t.key for t in targets if t.key == DEFAULT_LEGACY_KEY)
