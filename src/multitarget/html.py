"""HTML document generation for the parent build.

``HtmlGenerator`` collects the parent's script assets, exposes them through
``compilation.html_hooks`` before and after tag creation, then renders a
document into the compilation's assets.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from pathlib import Path
from string import Template
from typing import TYPE_CHECKING, Any, Optional

from .builders.base import Asset
from .plugins import Plugin

if TYPE_CHECKING:
    from .compiler import Compilation, Compiler

logger = logging.getLogger("multitarget.html")

SCRIPT_EXTENSION = ".js"

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>$title</title>
$head
</head>
<body>
$body
</body>
</html>
"""


def is_script(filename: str) -> bool:
    return filename.endswith(SCRIPT_EXTENSION)


@dataclass
class ChunkManifestEntry:
    entry: str
    hash: str = ""
    size: int = 0
    css: list[str] = field(default_factory=list)


@dataclass
class HtmlAssets:
    """Chunk manifest plus the ordered list of script files to inject."""

    chunks: dict[str, ChunkManifestEntry] = field(default_factory=dict)
    js: list[str] = field(default_factory=list)

    @classmethod
    def from_compilation(cls, compilation: "Compilation") -> "HtmlAssets":
        assets = cls()
        for chunk in compilation.chunks:
            entry = next((f for f in chunk.files if is_script(f)), None)
            if entry is None:
                continue
            assets.chunks[chunk.name] = ChunkManifestEntry(entry=entry, hash=chunk.hash, size=chunk.size)
            for f in chunk.files:
                if is_script(f) and f not in assets.js:
                    assets.js.append(f)
        return assets


@dataclass
class ScriptTag:
    """A generated tag. Attribute value True renders as a bare boolean attribute."""

    tag_name: str = "script"
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def script(cls, src: str) -> "ScriptTag":
        return cls(tag_name="script", attributes={"src": src})

    @property
    def src(self) -> Optional[str]:
        return self.attributes.get("src")

    def render(self) -> str:
        parts = [self.tag_name]
        for key, value in self.attributes.items():
            if value is True:
                parts.append(key)
            elif value is not None and value is not False:
                parts.append(f'{key}="{html.escape(str(value), quote=True)}"')
        return f"<{' '.join(parts)}></{self.tag_name}>"


@dataclass
class HtmlPluginData:
    """Mutable context passed to ``html_hooks.before_generation``."""

    compilation: "Compilation"
    filename: str
    assets: HtmlAssets


@dataclass
class AssetTagData:
    """Mutable context passed to ``html_hooks.alter_asset_tags``."""

    compilation: "Compilation"
    filename: str
    head: list[ScriptTag] = field(default_factory=list)
    body: list[ScriptTag] = field(default_factory=list)

    def script_tags(self) -> list[ScriptTag]:
        return [t for t in self.head + self.body if t.tag_name == "script"]


class HtmlGenerator(Plugin):
    """Renders one HTML document per instance on the parent's ``emit`` hook."""

    generates_html = True

    def __init__(
        self,
        filename: str = "index.html",
        title: str = "",
        template: Optional[str] = None,
        inject: str = "body",
    ):
        if inject not in ("head", "body"):
            raise ValueError(f"inject must be 'head' or 'body', got {inject!r}")
        self.filename = filename
        self.title = title
        self.template = template
        self.inject = inject

    def apply(self, compiler: "Compiler") -> None:
        compiler.hooks.emit.tap(f"HtmlGenerator[{self.filename}]", self.generate)

    async def generate(self, compilation: "Compilation") -> str:
        data = HtmlPluginData(
            compilation=compilation,
            filename=self.filename,
            assets=HtmlAssets.from_compilation(compilation),
        )
        await compilation.html_hooks.before_generation.promise(data)

        tags = [ScriptTag.script(src) for src in data.assets.js]
        tag_data = AssetTagData(compilation=compilation, filename=self.filename)
        if self.inject == "head":
            tag_data.head = tags
        else:
            tag_data.body = tags
        await compilation.html_hooks.alter_asset_tags.promise(tag_data)

        document = self.render(tag_data)
        compilation.assets[self.filename] = Asset(source=document)
        logger.info("Generated %s with %d script tag(s)", self.filename, len(tag_data.script_tags()))
        return document

    def render(self, tag_data: AssetTagData) -> str:
        source = Path(self.template).read_text(encoding="utf-8") if self.template else DEFAULT_TEMPLATE
        return Template(source).safe_substitute(
            title=html.escape(self.title),
            head="\n".join(t.render() for t in tag_data.head),
            body="\n".join(t.render() for t in tag_data.body),
        )
