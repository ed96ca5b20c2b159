"""Run one child build per target under a parent build."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from .builders.base import BuildEngine
from .compiler import Compilation, CompilationRole, Compiler
from .config import BuildConfig

logger = logging.getLogger("multitarget.runner")

CHILD_BUILD_PREFIX = "multi-target-child-"


def child_build_name(key: str) -> str:
    return f"{CHILD_BUILD_PREFIX}{key}"


def target_key_of(name: Optional[str]) -> Optional[str]:
    """Target key encoded in a child build name, or None for any other build."""
    if not name or not name.startswith(CHILD_BUILD_PREFIX):
        return None
    return name[len(CHILD_BUILD_PREFIX):]


class ChildBuildRunner:
    """Owns the child compilers and joins them all-or-nothing.

    Args:
        configs: isolated configuration per target key
        engine: build engine shared by all children (engines hold no per-build state)
        max_concurrent: bound on simultaneously running children; None runs all at once
    """

    def __init__(
        self,
        configs: dict[str, BuildConfig],
        engine: Optional[BuildEngine] = None,
        max_concurrent: Optional[int] = None,
    ):
        self.compilers: dict[str, Compiler] = {
            key: Compiler(config, engine, name=child_build_name(key), role=CompilationRole.CHILD)
            for key, config in configs.items()
        }
        self.max_concurrent = max_concurrent

    def attach(self, compilation: Compilation) -> bool:
        """Register the children under *compilation* if it is a top-level build.

        Returns False (and registers nothing) for a child-role compilation.
        """
        if compilation.role is not CompilationRole.PARENT:
            logger.debug("Skipping child registration inside child build %r", compilation.name)
            return False
        for compiler in self.compilers.values():
            compiler.parent_compilation = compilation
        return True

    async def run(self) -> list[Compilation]:
        """Run every child concurrently.

        Resolves with the child compilations once all succeed. The first
        failure is re-raised as-is; siblings are not cancelled.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent) if self.max_concurrent else None

        async def run_child(key: str, compiler: Compiler) -> Compilation:
            start = time.time()
            if semaphore is None:
                result = await compiler.run_as_child()
            else:
                async with semaphore:
                    result = await compiler.run_as_child()
            logger.info("Child build %r finished in %.2fs", key, time.time() - start)
            return result

        logger.info("Starting %d child build(s): %s", len(self.compilers), ", ".join(self.compilers))
        try:
            return list(await asyncio.gather(*(run_child(k, c) for k, c in self.compilers.items())))
        except Exception as e:
            logger.error("Child build failed: %s", e)
            raise
