"""multitarget – compile one source tree into modern and legacy bundles in one build pass"""

__version__ = "0.1.0"

from .aggregator import AssetAggregator
from .builders import BuildArtifacts, BuildEngine, BuildError, StaticBuildEngine, get_engine
from .classifier import ScriptTagClassifier
from .compiler import Compilation, CompilationRole, Compiler
from .config import BuildConfig, ModuleRule, ProjectConfig, Settings, load_config
from .derive import TargetConfigBuilder, derive
from .errors import ChildBuildError, ConfigurationError, MultiTargetError
from .html import HtmlAssets, HtmlGenerator, ScriptTag
from .plugin import MultiTargetPlugin, create_compiler
from .plugins import ChunkGroupingPlugin, Plugin
from .runner import CHILD_BUILD_PREFIX, ChildBuildRunner
from .targets import BuildTarget

__all__ = [
    # Orchestration
    "MultiTargetPlugin",
    "create_compiler",
    "BuildTarget",
    "TargetConfigBuilder",
    "derive",
    "ChildBuildRunner",
    "CHILD_BUILD_PREFIX",
    "AssetAggregator",
    "ScriptTagClassifier",
    # Build host
    "Compiler",
    "Compilation",
    "CompilationRole",
    "Plugin",
    "ChunkGroupingPlugin",
    "HtmlGenerator",
    "HtmlAssets",
    "ScriptTag",
    # Engines
    "BuildEngine",
    "BuildArtifacts",
    "StaticBuildEngine",
    "get_engine",
    # Configuration
    "BuildConfig",
    "ModuleRule",
    "ProjectConfig",
    "Settings",
    "load_config",
    # Errors
    "MultiTargetError",
    "ConfigurationError",
    "ChildBuildError",
    "BuildError",
    "__version__",
]
