"""GPU lookup, detection and database build commands."""

from pathlib import Path

import typer
from rich.table import Table

from modelfit.cli.common import build_resolver, console, load_cli_config, profile_table
from modelfit.gpu.builder import build_database
from modelfit.hardware.detect import probe_hardware


def lookup_command(name: str, tier: int, config_path: str | None = None) -> None:
    """Resolve a GPU name and show its profile.

    Args:
        name: GPU name as reported by a platform
        tier: Tier used if the GPU has to be estimated
        config_path: Optional path to config file
    """
    config = load_cli_config(config_path)
    resolver = build_resolver(config)

    profile = resolver.resolve_or_estimate(name, tier)
    if profile is None:
        console.print("[red]GPU name is empty[/red]")
        raise typer.Exit(1)

    console.print(profile_table(name, profile, resolver.match_key(name)))


def detect_command(config_path: str | None = None) -> None:
    """Probe the host GPU and show its profile."""
    config = load_cli_config(config_path)
    resolver = build_resolver(config)

    hardware = probe_hardware(resolver, gpu_name=config.gpu.name, tier=config.gpu.tier)
    if not hardware.gpu_name:
        console.print("[yellow]No GPU detected.[/yellow]")
        console.print("Set [bold]gpu.name[/bold] in your config to name it explicitly.")
        raise typer.Exit(1)

    profile = resolver.resolve_or_estimate(hardware.gpu_name, hardware.tier)
    console.print(profile_table(hardware.gpu_name, profile, resolver.match_key(hardware.gpu_name)))


def build_db_command(corpus: str, output: str) -> None:
    """Build the reference database from a benchmark corpus.

    Args:
        corpus: Directory of benchmark JSON files
        output: Destination of the database artifact
    """
    try:
        database = build_database(corpus)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    database.to_json(output)

    table = Table(title="GPUs by vendor", show_header=True, header_style="bold cyan")
    table.add_column("Vendor", style="white")
    table.add_column("GPUs", justify="right")
    for vendor, count in sorted(database.vendor_counts().items(), key=lambda item: -item[1]):
        table.add_row(vendor, str(count))

    console.print(table)
    console.print(f"[green]✓[/green] Wrote {len(database)} GPUs to {Path(output)}")
