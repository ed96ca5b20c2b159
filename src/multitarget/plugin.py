"""MultiTargetPlugin – build one source tree for several targets in one pass."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from .aggregator import AssetAggregator
from .builders.base import BuildEngine
from .classifier import ScriptTagClassifier
from .compiler import CompilationRole, Compiler
from .config import DEFAULT_TRANSFORM_LOADER, BuildConfig, ProjectConfig
from .derive import TargetConfigBuilder
from .plugins import Plugin
from .runner import ChildBuildRunner
from .targets import DEFAULT_LEGACY_KEY, BuildTarget, legacy_keys, parse_targets, validate_targets

if TYPE_CHECKING:
    from .compiler import Compilation

logger = logging.getLogger("multitarget.plugin")


class MultiTargetPlugin(Plugin):
    """Runs one child build per target and wires their output into the parent's HTML.

    Usage::

        config.plugins.append(MultiTargetPlugin(
            BuildTarget("modern", {"targets": {"esmodules": True}}),
            BuildTarget("legacy", {"targets": "> 0.5%, ie 11"}, legacy=True),
        ))
        compilation = await Compiler(config).run()

    Targets are validated here, before any build work. Per-target configs are
    derived when the plugin is applied to the parent compiler.
    """

    def __init__(
        self,
        *targets: BuildTarget | dict,
        engine: Optional[BuildEngine] = None,
        html_plugin_types: Iterable[type] = (),
        max_concurrent: Optional[int] = None,
        loader: str = DEFAULT_TRANSFORM_LOADER,
    ):
        self.targets: list[BuildTarget] = validate_targets(parse_targets(targets))
        self.engine = engine
        self.html_plugin_types = tuple(html_plugin_types)
        self.max_concurrent = max_concurrent
        self.loader = loader
        self.configs: dict[str, BuildConfig] = {}
        self.runner: Optional[ChildBuildRunner] = None
        legacy = legacy_keys(self.targets)
        if len(self.targets) > 1 and not legacy:
            logger.warning(
                "No legacy target among %s: every script will be tagged type=\"module\"; "
                "flag one target legacy=True or key it %r",
                ", ".join(self.keys), DEFAULT_LEGACY_KEY,
            )
        self.aggregator = AssetAggregator(ScriptTagClassifier(legacy))

    @property
    def keys(self) -> list[str]:
        return [t.key for t in self.targets]

    def derive_configs(self, base_config: BuildConfig) -> dict[str, BuildConfig]:
        builder = TargetConfigBuilder(owner=self, html_plugin_types=self.html_plugin_types, loader=self.loader)
        return builder.derive_all(base_config, self.targets)

    def apply(self, compiler: Compiler) -> None:
        self.configs = self.derive_configs(compiler.config)
        self.runner = ChildBuildRunner(
            self.configs,
            self.engine or compiler.engine,
            max_concurrent=self.max_concurrent,
        )
        compiler.hooks.compilation.tap("MultiTargetPlugin", self._on_compilation)
        compiler.hooks.make.tap("MultiTargetPlugin", self._on_make)
        logger.info("Configured %d target(s): %s", len(self.targets), ", ".join(self.keys))

    def _on_compilation(self, compilation: "Compilation") -> None:
        if self.runner.attach(compilation):
            self.aggregator.register(compilation)

    async def _on_make(self, compilation: "Compilation") -> Any:
        if compilation.role is CompilationRole.CHILD:
            logger.debug("Skipping child builds inside child compilation %r", compilation.name)
            return None
        return await self.runner.run()


def create_compiler(
    project: ProjectConfig,
    engine: Optional[BuildEngine] = None,
    max_concurrent: Optional[int] = None,
) -> Compiler:
    """Parent compiler for a loaded project with a MultiTargetPlugin appended."""
    plugin = MultiTargetPlugin(*project.targets, max_concurrent=max_concurrent)
    config = dataclasses.replace(project.build, plugins=[*project.build.plugins, plugin])
    return Compiler(config, engine)
