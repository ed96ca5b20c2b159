"""Build engines that turn a BuildConfig into chunks and assets."""

from .base import Asset, BuildArtifacts, BuildEngine, BuildError, Chunk
from .registry import get_engine, register_engine
from .static import StaticBuildEngine

__all__ = [
    "Asset",
    "BuildArtifacts",
    "BuildEngine",
    "BuildError",
    "Chunk",
    "StaticBuildEngine",
    "get_engine",
    "register_engine",
]
