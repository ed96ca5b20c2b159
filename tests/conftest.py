from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_SRC = (_PROJECT_ROOT / "src").resolve()
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from multitarget.builders import BuildArtifacts, BuildEngine, StaticBuildEngine  # noqa: E402
from multitarget.classifier import LEGACY, MODERN  # noqa: E402
from multitarget.config import BuildConfig, ModuleRule  # noqa: E402
from multitarget.html import HtmlGenerator, ScriptTag  # noqa: E402


class RecordingEngine(BuildEngine):
    """Async engine that delegates to StaticBuildEngine and records calls.

    ``fail`` maps a build name to the exception to raise for it; ``delay``
    maps a build name to seconds to sleep before finishing.
    """

    def __init__(self, fail: Optional[dict] = None, delay: Optional[dict] = None):
        self.inner = StaticBuildEngine()
        self.fail = fail or {}
        self.delay = delay or {}
        self.calls: list[Optional[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def engine_name(self) -> str:
        return "recording"

    async def execute(self, config, *, name=None, on_log=None) -> BuildArtifacts:
        self.calls.append(name)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay.get(name, 0.01))
            if name in self.fail:
                raise self.fail[name]
            return self.inner.execute(config, name=name, on_log=on_log)
        finally:
            self.in_flight -= 1


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    src.mkdir()
    (src / "main.js").write_text("export const answer = () => 42;\n")
    (src / "admin.js").write_text("import { answer } from './main.js';\nconsole.log(answer());\n")
    return tmp_path


def make_config(project_dir: Path, plugins: Optional[list] = None, rules: Optional[list] = None) -> BuildConfig:
    return BuildConfig(
        entry={"main": "src/main.js", "admin": "src/admin.js"},
        context=str(project_dir),
        module_rules=rules if rules is not None else [
            ModuleRule(test=r"\.js$", loader="babel-loader", options={"presets": ["env"]}),
        ],
        plugins=plugins if plugins is not None else [HtmlGenerator()],
    )


def classification_of(tag: ScriptTag) -> str:
    """``legacy``/``modern`` from a tag's attributes; unmarked tags raise."""
    if tag.attributes.get("nomodule") is True:
        return LEGACY
    if tag.attributes.get("type") == "module":
        return MODERN
    raise ValueError(f"Unclassified script tag: {tag.render()}")


@pytest.fixture
def base_config(project_dir: Path) -> BuildConfig:
    return make_config(project_dir)


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()
