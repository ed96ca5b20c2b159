"""Merge child build output into the parent's HTML generation context."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .classifier import ScriptTagClassifier
from .html import AssetTagData, ChunkManifestEntry, HtmlPluginData, is_script
from .runner import CHILD_BUILD_PREFIX

if TYPE_CHECKING:
    from .compiler import Compilation

logger = logging.getLogger("multitarget.aggregator")


class AssetAggregator:
    """Hooks child chunks and assets into HTML generation.

    Registered per parent compilation. ``merge`` is additive and idempotent:
    entries already in the manifest (including the parent's own) are left
    alone, and script names already listed are not appended again.
    """

    def __init__(self, classifier: ScriptTagClassifier):
        self.classifier = classifier

    def register(self, compilation: "Compilation") -> None:
        hooks = compilation.html_hooks
        hooks.before_generation.tap("MultiTarget.merge", self.merge)
        hooks.alter_asset_tags.tap("MultiTarget.classify", self.classify)

    def merge(self, data: HtmlPluginData) -> int:
        """Add every prefixed child's script chunks to *data*; return how many entries were added."""
        added = 0
        manifest = data.assets.chunks
        scripts = data.assets.js

        for child in data.compilation.children_with_prefix(CHILD_BUILD_PREFIX):
            for chunk in child.chunks:
                entry = next((f for f in chunk.files if is_script(f)), None)
                if entry is None or chunk.name in manifest:
                    continue
                manifest[chunk.name] = ChunkManifestEntry(entry=entry, hash=chunk.hash, size=chunk.size)
                added += 1

            for filename in child.assets:
                if is_script(filename) and filename not in scripts:
                    scripts.append(filename)

        if added:
            logger.debug("Merged %d child chunk(s) into %s", added, data.filename)
        return added

    def classify(self, tag_data: AssetTagData) -> None:
        self.classifier.classify(tag_data)
