"""Color utility commands: contrast, simulate and palette."""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..theme_engine.color import generate_palette, get_color_info
from ..theme_engine.colorblind import get_all_simulations, simulate_color_blindness
from ..theme_engine.contrast import (
    calculate_contrast_ratio,
    check_contrast,
    fix_contrast,
    get_contrast_description,
    required_ratio,
)
from ..theme_engine.schema import ColorBlindnessType, WCAGLevel
from ..theme_engine.validation import is_valid_color_literal
from .theme_cmds import swatch


def _mark(passed: bool) -> Text:
    return Text("✅ pass", style="green") if passed else Text("❌ fail", style="red")


def _require_color(*values: str) -> None:
    for value in values:
        if not is_valid_color_literal(value, allow_keywords=False):
            raise ValueError(f"Not a color: {value!r}")


@click.command()
@click.argument('foreground')
@click.argument('background')
@click.option('--fix', is_flag=True, help="Suggest a foreground that meets the target level")
@click.option('--level', type=click.Choice([level.value for level in WCAGLevel], case_sensitive=False),
              default=WCAGLevel.AA.value, show_default=True, help="Target level for --fix")
@click.option('--large-text', is_flag=True, help="Use the large text threshold for --fix")
def contrast(foreground: str, background: str, fix: bool, level: str, large_text: bool):
    """Check the WCAG contrast ratio of two colors."""
    try:
        _require_color(foreground, background)
        console = Console()
        result = check_contrast(foreground, background)

        console.print(f"\n{foreground} on {background}: "
                      f"[bold]{result.ratio}:1[/bold] ({get_contrast_description(result.ratio)})\n")

        table = Table(show_header=True)
        table.add_column("Requirement")
        table.add_column("Minimum", justify="right")
        table.add_column("Result")
        table.add_row("AA normal text", "4.5:1", _mark(result.aa))
        table.add_row("AA large text", "3:1", _mark(result.aa_large))
        table.add_row("AAA normal text", "7:1", _mark(result.aaa))
        table.add_row("AAA large text", "4.5:1", _mark(result.aaa_large))
        console.print(table)

        if fix:
            target = required_ratio(level.upper(), large_text)
            suggestion = fix_contrast(foreground, background, target_ratio=target)
            if calculate_contrast_ratio(foreground, background) >= target:
                console.print(f"\n[green]Already meets {target}:1[/green]")
            elif suggestion.success:
                console.print(f"\n[green]Suggested foreground:[/green] {suggestion.fixed} "
                              f"({suggestion.final_ratio}:1)")
            else:
                console.print(f"\n[yellow]Could not reach {target}:1; closest is "
                              f"{suggestion.fixed} ({suggestion.final_ratio}:1)[/yellow]")

    except Exception as e:
        console = Console()
        console.print(f"[red]Error checking contrast: {e}[/red]")
        sys.exit(1)


@click.command()
@click.argument('color')
@click.option('--type', 'deficiency', type=click.Choice([t.value for t in ColorBlindnessType]),
              help="Simulate one deficiency instead of all of them")
def simulate(color: str, deficiency: Optional[str]):
    """Show how a color looks under color vision deficiencies."""
    try:
        _require_color(color)
        console = Console()
        if deficiency:
            simulations = {deficiency: simulate_color_blindness(color, ColorBlindnessType(deficiency))}
        else:
            simulations = get_all_simulations(color)

        table = Table(title=f"Color Blindness Simulation: {color}", show_header=True)
        table.add_column("Vision", style="cyan")
        table.add_column("Color")
        table.add_column("")
        table.add_row("normal", color, swatch(color))
        for name, simulated in simulations.items():
            table.add_row(name, simulated, swatch(simulated))
        console.print(table)

    except Exception as e:
        console = Console()
        console.print(f"[red]Error simulating color: {e}[/red]")
        sys.exit(1)


@click.command()
@click.argument('color')
@click.option('--steps', type=click.IntRange(1, 20), default=10, show_default=True,
              help="Number of shades")
def palette(color: str, steps: int):
    """Generate a light-to-dark shade ramp from a base color."""
    try:
        _require_color(color)
        console = Console()
        color_info = get_color_info(color)
        h, s, l = color_info['hsl']
        r, g, b = color_info['rgb']
        console.print(f"\n[bold]{color_info['hex']}[/bold]  rgb({r}, {g}, {b})  "
                      f"hsl({h}, {s}%, {l}%)  luminance {color_info['luminance']}\n")

        table = Table(title="Palette", show_header=True)
        table.add_column("Shade", justify="right", style="cyan")
        table.add_column("Hex")
        table.add_column("")
        for shade, hex_color in generate_palette(color, steps):
            table.add_row(str(shade), hex_color, swatch(hex_color))
        console.print(table)

    except Exception as e:
        console = Console()
        console.print(f"[red]Error generating palette: {e}[/red]")
        sys.exit(1)
