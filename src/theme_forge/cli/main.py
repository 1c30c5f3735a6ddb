"""theme-forge command-line interface."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

import click
from rich.console import Console

from ..config import Config, get_config
from .. import __version__
from ..theme_engine import ThemeEngine
from ..theme_engine.registry import load_theme_file

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(verbose: bool, log_level: str) -> None:
    """Configure root logging for a CLI run."""
    level = logging.DEBUG if verbose else getattr(logging, log_level, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # basicConfig does nothing when handlers already exist
    logging.getLogger().setLevel(level)


def get_engine() -> ThemeEngine:
    """Get a theme engine for the active configuration."""
    return ThemeEngine.from_config(get_config())


def load_theme_record(engine: ThemeEngine, source: str) -> Dict[str, Any]:
    """Load the raw record of a registry theme or a theme file.

    Records are returned before model validation so invalid themes can
    still be validated, audited and sanitized.

    Raises:
        ValueError: If the source is neither a known theme nor a readable file
    """
    if engine.theme_exists(source):
        return engine.registry.load_theme_data(source)

    path = Path(source).expanduser()
    if not path.is_file():
        raise ValueError(f"Theme '{source}' not found. Use 'theme-forge list' to see available themes.")
    return engine.registry.resolve_inheritance(load_theme_file(path), path.stem)


@click.group()
@click.option("--config", type=click.Path(), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(__version__, prog_name="theme-forge")
@click.pass_context
def main(ctx, config, verbose):
    """theme-forge - resolve design tokens and generate theme files."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    try:
        forge_config = Config.reload(Path(config)) if config else get_config()
    except Exception as e:
        Console().print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    configure_logging(verbose, forge_config.log_level)


def _register_commands() -> None:
    from .color_cmds import contrast, palette, simulate
    from .output_cmds import formats, generate, import_theme
    from .theme_cmds import audit, dark_mode, info, list_themes, validate

    for command in (list_themes, info, validate, audit, dark_mode,
                    contrast, simulate, palette,
                    generate, formats, import_theme):
        main.add_command(command)


_register_commands()
