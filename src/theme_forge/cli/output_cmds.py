"""Output commands: generate, formats and import."""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from ..generators import GENERATORS, generate_all_formats, list_formats
from ..importers import IMPORTERS, auto_import, detect_format
from .main import get_engine, load_theme_record
from .theme_cmds import dump_yaml

FAMILIES = sorted({spec.family for spec in GENERATORS.values()})


@click.command()
@click.argument('source')
@click.option('--format', '-f', 'format_ids', multiple=True, type=click.Choice(list(GENERATORS)),
              help="Output format; repeat for several (default from config)")
@click.option('--all', 'all_formats', is_flag=True, help="Generate every registered format")
@click.option('--output', '-o', 'out_dir', type=click.Path(file_okay=False),
              help="Output directory (default <output_dir>/<theme slug>)")
@click.option('--stdout', 'to_stdout', is_flag=True, help="Print generated files instead of writing them")
@click.option('--strict', is_flag=True, help="Fail on token references that do not resolve")
def generate(source: str, format_ids: Tuple[str, ...], all_formats: bool, out_dir: Optional[str],
             to_stdout: bool, strict: bool):
    """Generate theme files for a theme name or theme file."""
    try:
        engine = get_engine()
        config = engine.config
        console = Console(stderr=to_stdout)

        if all_formats:
            formats = None
        elif format_ids:
            formats = list(format_ids)
        else:
            formats = list(config.default_formats)

        compiled = engine.compile(load_theme_record(engine, source), strict=strict or None)
        outputs = generate_all_formats(
            compiled,
            formats=formats,
            max_workers=config.max_workers,
            css_scope=config.css_scope,
        )

        if to_stdout:
            for output in outputs:
                if len(outputs) > 1:
                    console.print(f"[dim]# {output.filename}[/dim]")
                click.echo(output.content, nl=not output.content.endswith("\n"))
            return

        target = Path(out_dir) if out_dir else config.get_output_path(compiled.slug)
        written = engine.write_outputs(outputs, target)

        table = Table(title=f"Generated: {compiled.meta.get('name', source)}", show_header=True)
        table.add_column("Format", style="cyan")
        table.add_column("File")
        table.add_column("Size", justify="right", style="dim")
        for output, path in zip(outputs, written):
            table.add_row(output.label, str(path), f"{len(output.content)} chars")
        console.print(table)
        console.print(f"[green]✅ Wrote {len(written)} file(s) to {target}[/green]")

    except Exception as e:
        console = Console()
        console.print(f"[red]Error generating theme: {e}[/red]")
        sys.exit(1)


@click.command()
@click.option('--family', type=click.Choice(FAMILIES), help="Only list one family of formats")
def formats(family: Optional[str]):
    """List the available output formats."""
    console = Console()
    table = Table(title="Output Formats", show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Family", style="blue")
    table.add_column("File")
    table.add_column("MIME Type", style="dim")
    for spec in list_formats(family):
        table.add_row(spec.format_id, spec.label, spec.family,
                      spec.output_filename("<slug>"), spec.mime_type)
    console.print(table)


@click.command(name="import")
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--from', 'source_format', type=click.Choice(['auto'] + list(IMPORTERS)), default='auto',
              show_default=True, help="Input format")
@click.option('--output', '-o', type=click.Path(dir_okay=False), help="Write the theme YAML to this file")
@click.option('--save', 'save_name', help="Save as a user theme under this name")
@click.option('--force', is_flag=True, help="Overwrite an existing user theme with --save")
def import_theme(file: str, source_format: str, output: Optional[str], save_name: Optional[str],
                 force: bool):
    """Import a theme from CSS, JSON, a Tailwind config or Figma tokens."""
    try:
        console = Console(stderr=not (output or save_name))
        content = Path(file).read_text(encoding='utf-8')

        if source_format == 'auto':
            console.print(f"[dim]Detected format: {detect_format(content)}[/dim]")
            result = auto_import(content)
        else:
            result = IMPORTERS[source_format](content)

        for warning in result.warnings:
            console.print(f"⚠️  {warning}", markup=False, style="yellow")
        if not result.success:
            for error in result.errors:
                console.print(f"❌ {error}", markup=False, style="red")
            console.print(f"[red]Error importing {file}[/red]")
            sys.exit(1)

        content = dump_yaml(result.theme)
        if save_name:
            path = get_engine().registry.save_user_theme(result.theme, save_name, overwrite=force)
            console.print(f"[green]✅ Saved user theme '{save_name}' to {path}[/green]")
        if output:
            path = Path(output)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
            console.print(f"[green]✅ Theme written to {path}[/green]")
        if not (output or save_name):
            click.echo(content, nl=False)

    except Exception as e:
        console = Console()
        console.print(f"[red]Error importing theme: {e}[/red]")
        sys.exit(1)
