"""Theme inspection commands: list, info, validate, audit and dark-mode."""

import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..theme_engine.color import to_hex
from ..theme_engine.darkmode import DarkModeOptions
from ..theme_engine.schema import DarkModeIntensity, Severity, ThemeConfig, WCAGLevel
from .main import get_engine, load_theme_record

SEVERITY_STYLES = {
    Severity.ERROR.value: "red",
    Severity.WARNING.value: "yellow",
    Severity.INFO.value: "cyan",
}


def swatch(color: str) -> Text:
    """A colored block for a color value."""
    return Text("    ", style=f"on {to_hex(color)}")


def dump_yaml(theme: ThemeConfig) -> str:
    return yaml.safe_dump(theme.to_dict(), default_flow_style=False, indent=2,
                          sort_keys=False, allow_unicode=True)


@click.command(name="list")
@click.option("--tag", help="Only show presets carrying this tag")
def list_themes(tag: Optional[str]):
    """List available themes."""
    try:
        engine = get_engine()
        console = Console()

        themes = engine.list_themes()
        if tag:
            tagged = set(engine.registry.get_presets_by_tag(tag))
            themes = [t for t in themes if t['name'] in tagged]

        if not themes:
            console.print("[yellow]No themes found.[/yellow]")
            return

        table = Table(title="Available Themes", show_header=True, header_style="bold")
        table.add_column("Name", style="cyan", min_width=12)
        table.add_column("Display Name", min_width=15)
        table.add_column("Type", style="blue")
        table.add_column("Tags", style="magenta")
        table.add_column("Description", style="dim")

        default_name = engine.config.default_theme
        for theme_info in themes:
            name = theme_info['name']
            if name == default_name:
                name = f"{name} [green](default)[/green]"
            table.add_row(
                name,
                theme_info.get('display_name', ''),
                theme_info.get('type', ''),
                ", ".join(theme_info.get('tags') or []),
                theme_info.get('description') or '',
            )

        console.print(table)

        tips = Text.assemble(
            ("Tips:\n", "bold"),
            ("• Show details: ", "dim"), ("theme-forge info <name>\n", "cyan"),
            ("• Generate files: ", "dim"), ("theme-forge generate <name> --all", "cyan"),
        )
        console.print(Panel(tips, border_style="dim"))

    except Exception as e:
        console = Console()
        console.print(f"[red]Error listing themes: {e}[/red]")
        sys.exit(1)


@click.command()
@click.argument('name')
def info(name: str):
    """Show detailed information about a theme."""
    try:
        engine = get_engine()
        console = Console()

        if not engine.theme_exists(name):
            console.print(f"[red]Error: Theme '{name}' not found.[/red]")
            console.print("Use 'theme-forge list' to see available themes.")
            sys.exit(1)

        theme_info = engine.get_theme_info(name)
        if 'error' in theme_info:
            console.print(f"[red]Error loading theme '{name}': {theme_info['error']}[/red]")
            sys.exit(1)

        console.print(f"\n[bold]Theme Information: {theme_info['display_name']}[/bold]\n")

        info_table = Table(show_header=False, box=None, padding=(0, 2))
        info_table.add_column("Property", style="blue", min_width=15)
        info_table.add_column("Value")

        info_table.add_row("Name", theme_info['name'])
        info_table.add_row("Author", theme_info.get('author') or 'Unknown')
        info_table.add_row("Version", theme_info.get('version') or '1.0.0')
        info_table.add_row("Type", theme_info.get('type', 'unknown'))
        if theme_info.get('extends'):
            info_table.add_row("Extends", theme_info['extends'])
        if theme_info.get('tags'):
            info_table.add_row("Tags", ", ".join(theme_info['tags']))
        typography = theme_info['typography']
        info_table.add_row("Font", typography['font_family'])
        info_table.add_row("Type Scale", f"{typography['base_size']}px x {typography['scale']}")
        info_table.add_row("Dark Mode", "enabled" if theme_info['dark_mode'] else "disabled")
        console.print(info_table)

        if theme_info.get('description'):
            console.print("\n[bold]Description[/bold]")
            console.print(theme_info['description'])

        # Swatches use resolved values so references show their target
        resolved = engine.compile(name).colors
        color_table = Table(title="Colors", show_header=True)
        color_table.add_column("Role", style="cyan")
        color_table.add_column("Value")
        color_table.add_column("Resolved")
        color_table.add_column("")
        for role, value in theme_info['colors'].items():
            final = resolved.get(role, value)
            color_table.add_row(role, value, final if final != value else "", swatch(final))
        console.print()
        console.print(color_table)

        issues = theme_info.get('validation_issues', [])
        if issues:
            console.print("\n[yellow]⚠️  Validation Issues[/yellow]")
            for issue in issues:
                console.print(f"  • {issue}", markup=False)

        console.print()

    except Exception as e:
        console = Console()
        console.print(f"[red]Error getting theme info: {e}[/red]")
        sys.exit(1)


@click.command()
@click.argument('source')
def validate(source: str):
    """Validate a theme by name or file; exits with 1 when errors are found."""
    try:
        engine = get_engine()
        console = Console()

        issues = engine.validate(load_theme_record(engine, source))
        errors = [issue for issue in issues if issue.is_error]

        if not issues:
            console.print(f"[green]✅ '{source}' is valid[/green]")
            return

        table = Table(title=f"Validation: {source}", show_header=True)
        table.add_column("Severity")
        table.add_column("Path", style="cyan")
        table.add_column("Message")
        for issue in issues:
            severity = Severity(issue.severity).value
            style = SEVERITY_STYLES.get(severity, "white")
            table.add_row(Text(severity, style=style), issue.path, issue.message)
        console.print(table)

        warning_count = len(issues) - len(errors)
        if errors:
            console.print(f"[red]❌ {len(errors)} error(s), {warning_count} warning(s)[/red]")
            sys.exit(1)
        console.print(f"[yellow]⚠️  {warning_count} warning(s); the theme is usable[/yellow]")

    except Exception as e:
        console = Console()
        console.print(f"[red]Error validating theme: {e}[/red]")
        sys.exit(1)


@click.command()
@click.argument('source')
@click.option('--level', type=click.Choice([level.value for level in WCAGLevel], case_sensitive=False),
              help="WCAG level to audit against (default from config)")
@click.option('--strict', is_flag=True, help="Exit with 1 when the audit finds errors")
def audit(source: str, level: Optional[str], strict: bool):
    """Run the accessibility audit on a theme."""
    try:
        engine = get_engine()
        console = Console()

        result = engine.audit(load_theme_record(engine, source), level.upper() if level else None)
        summary = result.summary
        level_name = WCAGLevel(result.level).value

        status = "[green]PASSED[/green]" if result.passed else "[red]FAILED[/red]"
        console.print(Panel(
            f"WCAG {level_name}: {status}\n"
            f"Score: [bold]{result.pass_rate}[/bold]/100  "
            f"({summary['passed_checks']}/{summary['total_checks']} checks passed)\n"
            f"Errors: {summary['errors']}  Warnings: {summary['warnings']}",
            title=f"Accessibility Audit: {source}",
            border_style="green" if result.passed else "red",
        ))

        if result.issues:
            table = Table(show_header=True)
            table.add_column("Severity")
            table.add_column("Category", style="blue")
            table.add_column("Field", style="cyan")
            table.add_column("Issue")
            table.add_column("Recommendation", style="dim")
            for issue in result.issues:
                severity = Severity(issue.severity).value
                table.add_row(
                    Text(severity, style=SEVERITY_STYLES.get(severity, "white")),
                    issue.category,
                    issue.field,
                    issue.message,
                    issue.recommendation or "",
                )
            console.print(table)

        if strict and not result.passed:
            sys.exit(1)

    except Exception as e:
        console = Console()
        console.print(f"[red]Error auditing theme: {e}[/red]")
        sys.exit(1)


@click.command(name="dark-mode")
@click.argument('source')
@click.option('--intensity', type=click.Choice([i.value for i in DarkModeIntensity]),
              help="How far colors move into the dark band (default from config)")
@click.option('--output', '-o', type=click.Path(), help="Write the theme YAML to this file")
def dark_mode(source: str, intensity: Optional[str], output: Optional[str]):
    """Generate a dark mode for a theme and print the resulting theme YAML."""
    try:
        engine = get_engine()
        console = Console()

        options = None
        if intensity:
            options = DarkModeOptions(intensity=DarkModeIntensity(intensity))
        theme = engine.dark_mode(load_theme_record(engine, source), options)
        content = dump_yaml(theme)

        if not output:
            click.echo(content, nl=False)
            return

        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')

        table = Table(title="Dark Colors", show_header=True)
        table.add_column("Role", style="cyan")
        table.add_column("Light")
        table.add_column("Dark")
        table.add_column("")
        light = theme.color_map()
        for role, value in (theme.dark_mode.colors or {}).items():
            table.add_row(role, light.get(role, ""), value, swatch(value))
        console.print(table)
        console.print(f"[green]✅ Dark theme written to {path}[/green]")

    except Exception as e:
        console = Console()
        console.print(f"[red]Error generating dark mode: {e}[/red]")
        sys.exit(1)
