"""CLI interface for pondsim.

This module provides a command-line interface for running open-pond
simulations from YAML configuration files without writing code.

Usage:
    pondsim run my-pond.yaml
    pondsim run --scenario batch --days 30
    pondsim list
    pondsim init "My Pond" -o my-pond.yaml
    pondsim validate my-pond.yaml
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pondsim.core.config import (
    PondConfig,
    SimulationConfig,
    WeatherConfig,
    load_config,
    save_config,
)
from pondsim.simulation.engine import run_from_config
from pondsim.simulation.results import timesteps_to_csv, write_json
from pondsim.simulation.scenarios import get_scenario, list_scenarios

if TYPE_CHECKING:
    from pondsim.core.state import SimulationResult

app = typer.Typer(
    name="pondsim",
    help="Open-pond microalgae growth, heat and water simulation.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

OUTPUT_FORMATS = ("console", "csv", "json")
HARVEST_MODES = ("none", "semi-continuous", "batch")


@app.command()
def run(
    config_path: Annotated[
        Path | None,
        typer.Argument(help="Path to YAML configuration file"),
    ] = None,
    scenario: Annotated[
        str | None,
        typer.Option("--scenario", "-s", help="Built-in scenario name"),
    ] = None,
    days: Annotated[
        int | None,
        typer.Option("--days", "-d", help="Override number of simulated days"),
    ] = None,
    harvest: Annotated[
        str | None,
        typer.Option("--harvest", help="Override harvest mode"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Output directory for results"),
    ] = None,
    format_: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: console, csv, json"),
    ] = "console",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Run an open-pond simulation from configuration."""
    if config_path and scenario:
        console.print("[red]Error:[/] Cannot specify both config file and --scenario")
        raise typer.Exit(1)

    if format_ not in OUTPUT_FORMATS:
        console.print(f"[red]Error:[/] Unknown format '{format_}'")
        console.print(f"Available: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    if harvest is not None and harvest not in HARVEST_MODES:
        console.print(f"[red]Error:[/] Unknown harvest mode '{harvest}'")
        console.print(f"Available: {', '.join(HARVEST_MODES)}")
        raise typer.Exit(1)

    if scenario:
        try:
            config = get_scenario(scenario)
        except KeyError:
            console.print(f"[red]Error:[/] Unknown scenario '{scenario}'")
            console.print(f"Available: {', '.join(n for n, _ in list_scenarios())}")
            raise typer.Exit(1) from None
    elif config_path:
        try:
            config = load_config(config_path)
        except FileNotFoundError:
            console.print(f"[red]Error:[/] Config file not found: {config_path}")
            raise typer.Exit(1) from None
        except Exception as e:
            console.print(f"[red]Error:[/] Invalid configuration: {e}")
            raise typer.Exit(1) from None
    else:
        console.print("[red]Error:[/] Provide a config file or --scenario")
        raise typer.Exit(1)

    # Apply overrides through validation so cross-field rules still hold
    try:
        config = _apply_overrides(config, days, harvest)
    except ValidationError as e:
        console.print(f"[red]Error:[/] Invalid override: {e}")
        raise typer.Exit(1) from None

    if not quiet:
        console.print(f"\n[bold]Running:[/] {config.name}")
        console.print(f"  Days: {config.total_days}")
        console.print(f"  Harvest: {config.pond.harvest_mode}")
        console.print(f"  Weather: {config.weather.source}\n")

    try:
        if not quiet:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Simulating...", total=None)
                result = run_from_config(config)
                progress.update(task, description="[green]Complete!")
        else:
            result = run_from_config(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/] Failed to run simulation: {e}")
        raise typer.Exit(1) from None

    _output_results(config, result, format_, output_dir, quiet)


def _apply_overrides(
    config: SimulationConfig, days: int | None, harvest: str | None
) -> SimulationConfig:
    """Return a validated copy of the configuration with CLI overrides."""
    if days is None and harvest is None:
        return config

    data = config.model_dump(by_alias=True)
    if days is not None:
        data["total_days"] = days
        if config.weather.source == "synthetic":
            data["weather"]["days"] = days
    if harvest is not None:
        data["pond"]["harvest_mode"] = harvest
    return SimulationConfig.model_validate(data)


@app.command("list")
def list_command() -> None:
    """List available built-in scenarios."""
    table = Table(title="Available Scenarios")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Days")
    table.add_column("Harvest")

    for name, description in list_scenarios():
        config = get_scenario(name)
        table.add_row(
            name, description, str(config.total_days), config.pond.harvest_mode
        )

    console.print(table)


@app.command()
def init(
    name: Annotated[str, typer.Argument(help="Name for the new configuration")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path"),
    ] = None,
) -> None:
    """Generate a starter YAML configuration file."""
    config = SimulationConfig(
        name=name,
        total_days=14,
        pond=PondConfig(harvest_mode="semi-continuous", harvest_threshold=1.0),
        weather=WeatherConfig(source="synthetic"),
    )

    # "My Pond" -> "my-pond.yaml"
    if output is None:
        output = Path(name.lower().replace(" ", "-") + ".yaml")

    save_config(config, output)
    console.print(f"[green]Created:[/] {output}")
    console.print("\nEdit this file to customize your simulation, then run:")
    console.print(f"  pondsim run {output}")


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to YAML configuration")],
) -> None:
    """Validate a configuration file without running."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] File not found: {config_path}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Invalid:[/] {e}")
        raise typer.Exit(1) from None

    geometry = config.pond.to_geometry()
    console.print(f"[green]Valid:[/] {config.name}")
    console.print(f"  Days: {config.total_days} from {config.start_hour:02d}:00")
    console.print(
        f"  Pond: {geometry.total_length:.1f}m x {geometry.width:.1f}m, "
        f"{config.pond.depth * 1000:.0f}mm deep"
    )
    console.print(f"  Surface area: {geometry.surface_area:.0f} m²")
    console.print(f"  Volume: {geometry.volume_m3:.1f} m³")
    console.print(f"  Harvest: {config.pond.harvest_mode}")
    console.print(f"  Weather: {config.weather.source}")


def _output_results(
    config: SimulationConfig,
    result: SimulationResult,
    format_: str,
    output_dir: Path | None,
    quiet: bool,
) -> None:
    """Output simulation results in requested format.

    Args:
        config: Configuration that was run.
        result: Simulation result.
        format_: Output format (console, csv, json).
        output_dir: Optional directory for file outputs.
        quiet: If True, suppress console output.
    """
    summary = result.summary

    if format_ == "console" and not quiet:
        table = Table(title="Simulation Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Days simulated", str(summary.total_days))
        table.add_row("Final density", f"{summary.final_density:.3f} g/L")
        table.add_row("Peak density", f"{summary.peak_density:.3f} g/L")
        table.add_row(
            "Avg areal productivity", f"{summary.avg_productivity_areal:.2f} g/m²/day"
        )
        table.add_row(
            "Avg volumetric productivity",
            f"{summary.avg_productivity_volumetric:.4f} g/L/day",
        )
        table.add_row(
            "Pond temperature",
            f"{summary.min_temperature:.1f} / {summary.avg_temperature:.1f} / "
            f"{summary.max_temperature:.1f} °C",
        )
        table.add_row("Harvests", str(summary.harvest_count))
        table.add_row("Total harvested", f"{summary.total_harvested_kg:.1f} kg")
        table.add_row("Evaporation", f"{summary.total_evaporation_l:.0f} L")
        table.add_row("Rainfall", f"{summary.total_rainfall_l:.0f} L")
        table.add_row("Makeup water", f"{summary.total_makeup_l:.0f} L")
        console.print()
        console.print(table)

    written: list[Path] = []
    if output_dir:
        output_dir = Path(output_dir)
        if format_ in ("json", "console"):
            written.append(write_json(result, output_dir / "results.json"))
        if format_ == "csv":
            written.append(
                timesteps_to_csv(result, output_dir / "timesteps.csv", config)
            )
    else:
        if format_ == "json" or config.output.json_.enabled:
            written.append(write_json(result, config.output.json_.path))
        if format_ == "csv" or config.output.csv.enabled:
            written.append(timesteps_to_csv(result, config.output.csv.path, config))

    if not quiet:
        for path in written:
            console.print(f"\n[dim]Results saved to {path}[/]")


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success).
    """
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())
