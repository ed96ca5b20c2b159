"""Static build engine: one chunk per entry, content-hashed, kept in memory.

This engine does no real module resolution. Each entry file is read from the
build context, stamped with the transform options bound to it and emitted
under the configured ``output.filename`` pattern. It is enough to exercise
the multi-target orchestration end to end and to back the CLI.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
import time
from pathlib import Path
from typing import Any, Callable, Optional

from ..config import DEFAULT_OUTPUT_FILENAME, DEFAULT_TRANSFORM_LOADER, BuildConfig, find_rule
from ..plugins import ChunkGroupingPlugin
from .base import Asset, BuildArtifacts, BuildEngine, BuildError, Chunk

_logger = logging.getLogger("multitarget.builders.static")

HASH_LENGTH = 20


def _content_hash(*parts: str) -> str:
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.encode("utf-8"))
    return digest.hexdigest()[:HASH_LENGTH]


def _render_filename(pattern: str, name: str, chunk_hash: str) -> str:
    return pattern.replace("[name]", name).replace("[hash]", chunk_hash).replace("[chunkhash]", chunk_hash)


def _options_banner(options: Any) -> str:
    return json.dumps(options, sort_keys=True, default=str)


class StaticBuildEngine(BuildEngine):
    """Emits one content-hashed chunk per entry point."""

    def __init__(self, loader: str = DEFAULT_TRANSFORM_LOADER):
        self.loader = loader

    @property
    def engine_name(self) -> str:
        return "static"

    def execute(
        self,
        config: BuildConfig,
        *,
        name: Optional[str] = None,
        on_log: Optional[Callable[[str], None]] = None,
    ) -> BuildArtifacts:
        t0 = time.monotonic()
        label = name or "main"
        logs: list[str] = []

        def _log(msg: str) -> None:
            logs.append(msg)
            self._log(on_log, msg)

        rule = find_rule(config.module_rules, self.loader)
        options = rule.options if rule is not None else None
        test = re.compile(rule.test) if rule is not None and rule.test else None
        pattern = config.output.get("filename") or DEFAULT_OUTPUT_FILENAME
        context = Path(config.context)

        artifacts = BuildArtifacts()
        for entry_name, source_path in config.entry.items():
            path = context / source_path
            try:
                source = path.read_text(encoding="utf-8")
            except OSError as e:
                _logger.error("[%s] Cannot read entry %r: %s", label, entry_name, e)
                raise BuildError(f"[{label}] Entry '{entry_name}' not readable: {path}") from e

            if options is not None and (test is None or test.search(str(source_path))):
                source = f"/* {self.loader} {_options_banner(options)} */\n{source}"

            chunk_hash = _content_hash(entry_name, source)
            filename = _render_filename(pattern, entry_name, chunk_hash)
            asset = Asset(source=source)
            artifacts.assets[filename] = asset
            artifacts.chunks.append(Chunk(name=entry_name, files=[filename], hash=chunk_hash, size=asset.size))
            _log(f"[{label}] {entry_name} -> {filename} ({asset.size} bytes)")

        for plugin in config.plugins:
            if not isinstance(plugin, ChunkGroupingPlugin):
                continue
            for chunk_name in plugin.names:
                source = f"/* shared chunk {chunk_name} */\n"
                chunk_hash = _content_hash(chunk_name, source, _options_banner(options))
                filename = _render_filename(pattern, chunk_name, chunk_hash)
                asset = Asset(source=source)
                artifacts.assets[filename] = asset
                artifacts.chunks.append(Chunk(name=chunk_name, files=[filename], hash=chunk_hash, size=asset.size))
                _log(f"[{label}] shared {chunk_name} -> {filename}")

        artifacts.logs = logs
        artifacts.elapsed_seconds = time.monotonic() - t0
        _logger.debug("[%s] Emitted %d chunk(s) in %.3fs", label, len(artifacts.chunks), artifacts.elapsed_seconds)
        return artifacts
