"""Plugin base class and capability markers."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

if TYPE_CHECKING:
    from .compiler import Compiler


class Plugin:
    """Base class for build plugins.

    ``generates_html`` is the capability marker for plugins that render HTML
    documents. Derived per-target configs drop every plugin carrying it so
    that only the parent build generates HTML.
    """

    generates_html: bool = False

    def apply(self, compiler: "Compiler") -> None:
        """Register hooks on *compiler*. Default: nothing."""


def is_html_plugin(plugin: Any, extra_types: Iterable[type] = ()) -> bool:
    """True when *plugin* declares the HTML capability or matches a registered type."""
    if getattr(plugin, "generates_html", False) is True:
        return True
    extra = tuple(extra_types)
    return bool(extra) and isinstance(plugin, extra)


class ChunkGroupingPlugin(Plugin):
    """Groups shared output into one or more named chunks (e.g. ``runtime``)."""

    def __init__(self, chunk_name: Optional[str] = None, chunk_names: Optional[list[str]] = None):
        if not chunk_name and not chunk_names:
            raise ValueError("ChunkGroupingPlugin needs chunk_name or chunk_names")
        self.chunk_name = chunk_name
        self.chunk_names = list(chunk_names or [])

    @property
    def names(self) -> list[str]:
        names = list(self.chunk_names)
        if self.chunk_name and self.chunk_name not in names:
            names.append(self.chunk_name)
        return names

    def renamed(self, rename: Callable[[str], str]) -> "ChunkGroupingPlugin":
        """Return a new instance with every chunk name passed through *rename*."""
        renamed = copy.copy(self)
        renamed.chunk_name = rename(self.chunk_name) if self.chunk_name else None
        renamed.chunk_names = [rename(n) for n in self.chunk_names]
        return renamed

    def __repr__(self) -> str:
        return f"ChunkGroupingPlugin(names={self.names!r})"
