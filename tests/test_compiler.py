"""Tests for the build host."""

import pytest

from conftest import make_config
from multitarget.builders import StaticBuildEngine
from multitarget.compiler import Compilation, CompilationRole, Compiler
from multitarget.plugins import Plugin


class LifecycleRecorder(Plugin):
    def __init__(self):
        self.events = []

    def apply(self, compiler):
        compiler.hooks.compilation.tap("rec", lambda c: self.events.append(("compilation", c.role)))
        compiler.hooks.make.tap("rec", self._make)
        compiler.hooks.emit.tap("rec", lambda c: self.events.append(("emit", len(c.chunks))))

    async def _make(self, compilation):
        self.events.append(("make", len(compilation.chunks)))


def test_plugins_applied_on_construction(project_dir):
    recorder = LifecycleRecorder()
    compiler = Compiler(make_config(project_dir, plugins=[recorder]))
    assert compiler.hooks.make.tap_names() == ["rec"]
    assert isinstance(compiler.engine, StaticBuildEngine)
    assert compiler.role is CompilationRole.PARENT


@pytest.mark.asyncio
async def test_lifecycle_order_with_sync_engine(project_dir):
    recorder = LifecycleRecorder()
    compilation = await Compiler(make_config(project_dir, plugins=[recorder])).run()

    assert recorder.events == [
        ("compilation", CompilationRole.PARENT),
        ("make", 0),
        ("emit", 2),
    ]
    assert {c.name for c in compilation.chunks} == {"main", "admin"}


@pytest.mark.asyncio
async def test_run_as_child_attaches_to_parent(project_dir, engine):
    parent = Compilation()
    compiler = Compiler(make_config(project_dir, plugins=[]), engine, name="kid", role=CompilationRole.CHILD)

    detached = await compiler.run_as_child()
    assert detached.parent is None
    assert parent.children == []

    compiler.parent_compilation = parent
    attached = await compiler.run_as_child()
    assert attached.is_child
    assert parent.children == [attached]
    assert attached.parent is parent
    assert engine.calls == ["kid", "kid"]


def test_children_with_prefix():
    parent = Compilation()
    parent.children = [Compilation(name="p-a"), Compilation(name="other"), Compilation()]
    assert [c.name for c in parent.children_with_prefix("p-")] == ["p-a"]
