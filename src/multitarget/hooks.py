"""Named extension points.

Each hook keeps its taps in registration order. ``SyncHook`` only accepts
plain callables and runs them inline; ``AsyncSeriesHook`` awaits each tap in
turn (plain callables are allowed too) and stops at the first exception,
which propagates to whoever awaited ``promise()``.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class Tap:
    name: str
    fn: Callable[..., Any]


class _Hook:
    def __init__(self, name: str):
        self.name = name
        self.taps: list[Tap] = []

    def tap(self, name: str, fn: Callable[..., Any]) -> None:
        if not callable(fn):
            raise TypeError(f"{self.name}: tap {name!r} is not callable")
        self.taps.append(Tap(name=name, fn=fn))

    def tap_names(self) -> list[str]:
        return [t.name for t in self.taps]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, taps={self.tap_names()})"


class SyncHook(_Hook):
    """Hook whose taps run synchronously, in order."""

    def tap(self, name: str, fn: Callable[..., Any]) -> None:
        if inspect.iscoroutinefunction(fn):
            raise TypeError(f"{self.name} is synchronous; tap {name!r} is a coroutine function")
        super().tap(name, fn)

    def call(self, *args: Any) -> None:
        for t in self.taps:
            t.fn(*args)


class AsyncSeriesHook(_Hook):
    """Hook whose taps are awaited one after another."""

    async def promise(self, *args: Any) -> None:
        for t in self.taps:
            result = t.fn(*args)
            if inspect.isawaitable(result):
                await result


class HtmlHooks:
    """Extension points of the HTML generator, one set per compilation.

    ``before_generation`` receives the mutable ``HtmlPluginData`` (asset
    manifest and script list) before any tag is created.
    ``alter_asset_tags`` receives the mutable ``AssetTagData`` (head and
    body tag lists) after tags are created and before rendering.
    """

    def __init__(self) -> None:
        self.before_generation = AsyncSeriesHook("html.before_generation")
        self.alter_asset_tags = AsyncSeriesHook("html.alter_asset_tags")
