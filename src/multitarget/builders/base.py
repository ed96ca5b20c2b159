"""Base build engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

from ..errors import ChildBuildError

if TYPE_CHECKING:
    from ..config import BuildConfig


class BuildError(ChildBuildError):
    """Raised when a build engine's pipeline fails."""


@dataclass
class Asset:
    """An emitted output file (kept in memory)."""

    source: str

    @property
    def size(self) -> int:
        return len(self.source.encode("utf-8"))


@dataclass
class Chunk:
    """A named group of bundled output files."""

    name: str
    files: list[str] = field(default_factory=list)
    hash: str = ""
    size: int = 0


@dataclass
class BuildArtifacts:
    """Result of running a build engine over one configuration."""

    chunks: list[Chunk] = field(default_factory=list)
    assets: dict[str, Asset] = field(default_factory=dict)
    logs: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    extra: dict[str, Any] = field(default_factory=dict)


class BuildEngine(ABC):
    """Resolves, transforms and bundles a configuration into artifacts."""

    @property
    @abstractmethod
    def engine_name(self) -> str:
        """Return the engine identifier."""

    @abstractmethod
    def execute(
        self,
        config: "BuildConfig",
        *,
        name: Optional[str] = None,
        on_log: Optional[Callable[[str], None]] = None,
    ) -> Union[BuildArtifacts, Awaitable[BuildArtifacts]]:
        """Run the pipeline for *config*.

        May return the artifacts directly or a coroutine producing them.
        Failures are raised as exceptions (``BuildError`` for the engines
        shipped here).
        """

    @staticmethod
    def _log(on_log: Optional[Callable[[str], None]], msg: str) -> None:
        if on_log:
            on_log(msg)
