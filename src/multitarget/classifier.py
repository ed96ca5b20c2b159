"""Mark generated script tags as module-capable or legacy fallback.

Browsers that understand ``type="module"`` skip scripts carrying
``nomodule``; older browsers ignore the unknown ``module`` type and do not
know ``nomodule``. Tagging each script one way or the other is therefore
enough for every browser to load exactly one variant.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .html import AssetTagData, ScriptTag
from .runner import child_build_name

logger = logging.getLogger("multitarget.classifier")

LEGACY = "legacy"
MODERN = "modern"


class ScriptTagClassifier:
    """Assigns ``nomodule`` to legacy-target scripts and ``type="module"`` to the rest."""

    def __init__(self, legacy_keys: Iterable[str]):
        self.legacy_names = frozenset(child_build_name(k) for k in legacy_keys)

    def legacy_assets(self, tag_data: AssetTagData) -> set[str]:
        assets: set[str] = set()
        for child in tag_data.compilation.children:
            if child.name in self.legacy_names:
                assets.update(child.assets)
        return assets

    def classify(self, tag_data: AssetTagData) -> dict[str, int]:
        legacy_assets = self.legacy_assets(tag_data)
        counts = {LEGACY: 0, MODERN: 0}
        for tag in tag_data.script_tags():
            kind = LEGACY if tag.src in legacy_assets else MODERN
            mark(tag, kind)
            counts[kind] += 1
        logger.debug("Classified script tags in %s: %s", tag_data.filename, counts)
        return counts


def mark(tag: ScriptTag, kind: str) -> None:
    if kind == LEGACY:
        tag.attributes.pop("type", None)
        tag.attributes["nomodule"] = True
    else:
        tag.attributes.pop("nomodule", None)
        tag.attributes["type"] = "module"
