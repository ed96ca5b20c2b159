"""Build host: runs a BuildConfig through a BuildEngine and its plugins."""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .builders.base import Asset, BuildArtifacts, BuildEngine, Chunk
from .builders.static import StaticBuildEngine
from .config import BuildConfig
from .hooks import AsyncSeriesHook, HtmlHooks, SyncHook

logger = logging.getLogger("multitarget.compiler")


class CompilationRole(str, Enum):
    """Whether a build is the top-level build or a subordinate of one."""

    PARENT = "parent"
    CHILD = "child"


@dataclass
class Compilation:
    """State of one build pass."""

    name: Optional[str] = None
    role: CompilationRole = CompilationRole.PARENT
    chunks: list[Chunk] = field(default_factory=list)
    assets: dict[str, Asset] = field(default_factory=dict)
    children: list["Compilation"] = field(default_factory=list)
    parent: Optional["Compilation"] = None
    logs: list[str] = field(default_factory=list)
    html_hooks: HtmlHooks = field(default_factory=HtmlHooks, repr=False, compare=False)

    @property
    def is_child(self) -> bool:
        return self.role is CompilationRole.CHILD

    def add_artifacts(self, artifacts: BuildArtifacts) -> None:
        self.chunks.extend(artifacts.chunks)
        self.assets.update(artifacts.assets)
        self.logs.extend(artifacts.logs)

    def children_with_prefix(self, prefix: str) -> list["Compilation"]:
        return [c for c in self.children if c.name and c.name.startswith(prefix)]


class CompilerHooks:
    """Lifecycle of a build pass, in execution order."""

    def __init__(self) -> None:
        self.compilation = SyncHook("compilation")
        self.make = AsyncSeriesHook("make")
        self.emit = AsyncSeriesHook("emit")


class Compiler:
    """Runs one configuration: ``compilation`` -> ``make`` -> engine -> ``emit``.

    Plugins listed in the configuration are applied on construction, so
    setup errors surface before anything runs.
    """

    def __init__(
        self,
        config: BuildConfig,
        engine: Optional[BuildEngine] = None,
        *,
        name: Optional[str] = None,
        role: CompilationRole = CompilationRole.PARENT,
    ):
        self.config = config
        self.engine = engine or StaticBuildEngine()
        self.name = name
        self.role = role
        self.parent_compilation: Optional[Compilation] = None
        self.hooks = CompilerHooks()

        for plugin in config.plugins:
            apply = getattr(plugin, "apply", None)
            if callable(apply):
                apply(self)

    async def run(self) -> Compilation:
        compilation = Compilation(name=self.name, role=self.role)
        self.hooks.compilation.call(compilation)
        await self.hooks.make.promise(compilation)

        logger.debug("Executing %s build %r", self.role.value, self.name or "<main>")
        compilation.add_artifacts(await self._execute())

        await self.hooks.emit.promise(compilation)
        return compilation

    async def run_as_child(self) -> Compilation:
        """Run and, if a parent compilation is registered, attach the result to it."""
        compilation = await self.run()
        parent = self.parent_compilation
        if parent is not None:
            compilation.parent = parent
            parent.children.append(compilation)
        return compilation

    async def _execute(self) -> BuildArtifacts:
        execute = functools.partial(self.engine.execute, self.config, name=self.name)
        if inspect.iscoroutinefunction(self.engine.execute):
            return await execute()
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, execute)
        if inspect.isawaitable(result):
            result = await result
        return result
