"""CLI for multitarget builds."""

import asyncio
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .builders import get_engine
from .config import Settings, load_config
from .errors import MultiTargetError
from .html import is_script
from .plugin import MultiTargetPlugin, create_compiler
from .runner import target_key_of
from .targets import legacy_keys


console = Console()


def _setup_logging(level: str, quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if quiet else level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="multitarget")
def cli():
    """multitarget – build one source tree for several browser targets."""
    pass


@cli.command()
@click.argument("config_path", type=click.Path(exists=True))
@click.option("--quiet", "-q", is_flag=True, help="Minimal output")
@click.option("--workers", "-w", default=None, type=int, help="Max concurrent child builds")
@click.option("--engine", "-e", "engine_name", default=None, help="Build engine name")
@click.option("--html/--no-html", "show_html", default=False, help="Print generated HTML documents")
def build(config_path: str, quiet: bool, workers: Optional[int], engine_name: Optional[str], show_html: bool):
    """Build every target and generate the HTML entry points."""
    try:
        settings = Settings.from_env()
        _setup_logging(settings.log_level, quiet)
        project = load_config(config_path)
        engine = get_engine(engine_name or settings.engine)
        compiler = create_compiler(project, engine=engine, max_concurrent=workers or settings.max_concurrent)
        compilation = asyncio.run(compiler.run())
    except (MultiTargetError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Build: {config_path}")
    table.add_column("Build", style="cyan")
    table.add_column("Chunk", style="blue")
    table.add_column("File")
    table.add_column("Size", justify="right")
    for comp in [compilation, *compilation.children]:
        label = target_key_of(comp.name) or "parent"
        for chunk in comp.chunks:
            table.add_row(label, chunk.name, ", ".join(chunk.files), str(chunk.size))
    console.print(table)

    documents = [name for name in compilation.assets if not is_script(name)]
    console.print(f"[green]✓ Built {len(compilation.children)} target(s), {len(documents)} HTML document(s)[/green]")
    if show_html:
        for name in documents:
            console.print(Panel(compilation.assets[name].source, title=name))


@cli.command()
@click.argument("config_path", type=click.Path(exists=True))
def inspect(config_path: str):
    """Show the per-target configurations without building."""
    try:
        project = load_config(config_path)
        plugin = MultiTargetPlugin(*project.targets)
        configs = plugin.derive_configs(project.build)
    except (MultiTargetError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Targets: {config_path}")
    table.add_column("Target", style="cyan")
    table.add_column("Legacy")
    table.add_column("Entries", style="blue")
    table.add_column("Plugins")
    legacy = legacy_keys(plugin.targets)
    for target in plugin.targets:
        config = configs[target.key]
        table.add_row(
            target.key,
            "yes" if target.key in legacy else "",
            ", ".join(config.entry),
            ", ".join(repr(p) for p in config.plugins) or "-",
        )
    console.print(table)


def main(argv=None):
    """Main entry point."""
    cli(argv)


if __name__ == "__main__":
    main()
