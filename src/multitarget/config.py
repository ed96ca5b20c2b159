"""Configuration models for multitarget builds."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .errors import ConfigurationError
from .targets import BuildTarget, parse_targets


DEFAULT_OUTPUT_FILENAME = "[name].[hash].js"
DEFAULT_TRANSFORM_LOADER = "babel-loader"


@dataclass
class ModuleRule:
    """A module-transform rule: which files go through which loader."""
    test: Optional[str] = None
    loader: Optional[str] = None
    use: Union[str, list["ModuleRule"], None] = None
    options: Any = None

    @classmethod
    def from_dict(cls, data: dict | str) -> "ModuleRule":
        if isinstance(data, str):
            return cls(loader=data)
        use = data.get("use")
        if isinstance(use, list):
            use = [cls.from_dict(item) for item in use]
        return cls(
            test=data.get("test"),
            loader=data.get("loader"),
            use=use,
            options=data.get("options"),
        )

    def to_dict(self) -> dict:
        use: Any = self.use
        if isinstance(use, list):
            use = [rule.to_dict() for rule in use]
        data: dict[str, Any] = {}
        for key, value in (("test", self.test), ("loader", self.loader), ("use", use), ("options", self.options)):
            if value is not None:
                data[key] = value
        return data


def find_rule(rules: list[ModuleRule], loader: str = DEFAULT_TRANSFORM_LOADER) -> Optional[ModuleRule]:
    """Depth-first search for the rule that applies *loader*."""
    for rule in rules:
        if rule.loader == loader or rule.use == loader:
            return rule
        if isinstance(rule.use, list):
            found = find_rule(rule.use, loader)
            if found is not None:
                return found
    return None


@dataclass
class BuildConfig:
    """Build configuration handed to the build engine."""
    entry: dict[str, str] = field(default_factory=dict)
    context: str = "."
    output: dict[str, Any] = field(default_factory=lambda: {"filename": DEFAULT_OUTPUT_FILENAME})
    module_rules: list[ModuleRule] = field(default_factory=list)
    plugins: list[Any] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict, base_path: Optional[Path] = None) -> "BuildConfig":
        """Create configuration from dictionary."""
        entry = data.get("entry", {})
        if isinstance(entry, str):
            entry = {"main": entry}
        if not isinstance(entry, dict):
            raise ConfigurationError("entry must be a mapping of name -> source path")

        context = data.get("context", ".")
        if base_path is not None and not os.path.isabs(context):
            context = str((base_path / context).resolve())

        output = {"filename": DEFAULT_OUTPUT_FILENAME}
        output.update(data.get("output") or {})

        rules = (data.get("module") or {}).get("rules", [])
        known_keys = {"entry", "context", "output", "module", "plugins"}

        return cls(
            entry=dict(entry),
            context=context,
            output=output,
            module_rules=[ModuleRule.from_dict(r) for r in rules],
            plugins=[_build_plugin(p) for p in data.get("plugins", [])],
            extra={k: v for k, v in data.items() if k not in known_keys},
        )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary (plugins are listed by type name)."""
        return {
            "entry": dict(self.entry),
            "context": self.context,
            "output": dict(self.output),
            "module": {"rules": [r.to_dict() for r in self.module_rules]},
            "plugins": [type(p).__name__ for p in self.plugins],
            **self.extra,
        }


def _build_plugin(raw: Any) -> Any:
    """Instantiate a plugin from its YAML form, e.g. ``{type: chunks, name: runtime}``."""
    from .html import HtmlGenerator
    from .plugins import ChunkGroupingPlugin

    if not isinstance(raw, dict) or "type" not in raw:
        return raw
    kind = str(raw["type"]).strip().lower()
    params = {k: v for k, v in raw.items() if k != "type"}
    try:
        if kind == "html":
            return HtmlGenerator(**params)
        if kind == "chunks":
            return ChunkGroupingPlugin(chunk_name=params.get("name"), chunk_names=params.get("names"))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {kind} plugin: {e}") from e
    raise ConfigurationError(f"Unknown plugin type: {kind}")


@dataclass
class Settings:
    """Runtime knobs read from the environment."""
    max_concurrent: Optional[int] = None
    log_level: str = "INFO"
    engine: str = "static"

    @classmethod
    def from_env(cls, env: Optional[dict[str, str]] = None) -> "Settings":
        src = os.environ if env is None else env

        def clean(value: Optional[str]) -> Optional[str]:
            if value is None:
                return None
            v = str(value).strip()
            return v or None

        max_concurrent = clean(src.get("MULTITARGET_MAX_CONCURRENT"))
        try:
            workers = int(max_concurrent) if max_concurrent else None
        except ValueError:
            raise ConfigurationError(f"MULTITARGET_MAX_CONCURRENT must be an integer, got {max_concurrent!r}") from None
        if workers is not None and workers < 1:
            workers = None

        return cls(
            max_concurrent=workers,
            log_level=(clean(src.get("MULTITARGET_LOG_LEVEL")) or "INFO").upper(),
            engine=(clean(src.get("MULTITARGET_ENGINE")) or "static").lower(),
        )


@dataclass
class ProjectConfig:
    """A build configuration plus its target list, as loaded from YAML."""
    build: BuildConfig
    targets: list[BuildTarget] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: Path) -> "ProjectConfig":
        """Load project configuration from YAML file."""
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")
        return cls.from_dict(data, base_path=path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_path: Optional[Path] = None) -> "ProjectConfig":
        build_data = {k: v for k, v in data.items() if k != "targets"}
        return cls(
            build=BuildConfig.from_dict(build_data, base_path=base_path),
            targets=parse_targets(data.get("targets", [])),
        )


def load_config(path: str | Path) -> ProjectConfig:
    """Load project configuration from file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return ProjectConfig.from_yaml(path)
