"""Derive an isolated, per-target build configuration from a shared base."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Optional

from .config import DEFAULT_TRANSFORM_LOADER, BuildConfig, find_rule
from .errors import ConfigurationError
from .plugins import ChunkGroupingPlugin, is_html_plugin
from .targets import BuildTarget

logger = logging.getLogger("multitarget.derive")


def namespaced(key: str, name: str) -> str:
    return f"{key}/{name}"


class TargetConfigBuilder:
    """Builds one isolated configuration per target.

    The base configuration is deep-copied and never mutated. Plugin
    instances are the one exception to the copy: they are carried over by
    identity (the list holding them is new), so the orchestrator can still
    recognise itself and stateful plugins are not cloned.

    Args:
        owner: the orchestrator plugin instance to strip from derived configs
        html_plugin_types: extra plugin types to treat as HTML generators,
            in addition to anything carrying the ``generates_html`` marker
        loader: name of the module-transform loader whose options are bound
    """

    def __init__(
        self,
        owner: Any = None,
        html_plugin_types: Iterable[type] = (),
        loader: str = DEFAULT_TRANSFORM_LOADER,
    ):
        self.owner = owner
        self.html_plugin_types = tuple(html_plugin_types)
        self.loader = loader

    def derive(self, base_config: BuildConfig, target: BuildTarget) -> BuildConfig:
        if find_rule(base_config.module_rules, self.loader) is None:
            raise ConfigurationError(f"Could not find {self.loader} rule in the base configuration")

        memo: dict[int, Any] = {id(p): p for p in base_config.plugins}
        config = copy.deepcopy(base_config, memo)

        plugins = self._target_plugins(target, config.plugins)
        config.plugins = [
            self._rename_chunks(plugin, target.key)
            for plugin in plugins
            if not self._is_excluded(plugin)
        ]

        config.entry = {namespaced(target.key, name): source for name, source in config.entry.items()}

        rule = find_rule(config.module_rules, self.loader)
        rule.options = copy.deepcopy(target.transform_options)

        logger.debug(
            "Derived config for target %r: entries=%s plugins=%s",
            target.key,
            list(config.entry),
            [type(p).__name__ for p in config.plugins],
        )
        return config

    def derive_all(self, base_config: BuildConfig, targets: Iterable[BuildTarget]) -> dict[str, BuildConfig]:
        """Derive every target's configuration, keyed by target key."""
        return {target.key: self.derive(base_config, target) for target in targets}

    def _target_plugins(self, target: BuildTarget, base_plugins: list) -> list:
        if target.plugin_factory is None:
            return list(base_plugins)
        try:
            plugins = target.plugin_factory()
        except Exception as e:
            raise ConfigurationError(f"Plugin factory for target {target.key!r} failed: {e}") from e
        if not isinstance(plugins, list):
            raise ConfigurationError(
                f"Plugin factory for target {target.key!r} must return a list, got {type(plugins).__name__}"
            )
        return list(plugins)

    def _is_excluded(self, plugin: Any) -> bool:
        from .plugin import MultiTargetPlugin

        if self.owner is not None and plugin is self.owner:
            return True
        if isinstance(plugin, MultiTargetPlugin):
            return True
        return is_html_plugin(plugin, self.html_plugin_types)

    @staticmethod
    def _rename_chunks(plugin: Any, key: str) -> Any:
        if isinstance(plugin, ChunkGroupingPlugin):
            return plugin.renamed(lambda original: namespaced(key, original))
        return plugin


def derive(
    base_config: BuildConfig,
    target: BuildTarget,
    *,
    owner: Optional[Any] = None,
    html_plugin_types: Iterable[type] = (),
) -> BuildConfig:
    """Shortcut for ``TargetConfigBuilder(...).derive(base_config, target)``."""
    return TargetConfigBuilder(owner=owner, html_plugin_types=html_plugin_types).derive(base_config, target)
