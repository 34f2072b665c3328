"""Helpers shared by CLI commands."""

import logging

import typer
from rich.console import Console
from rich.table import Table

from modelfit.config.loader import ConfigError, load_config
from modelfit.config.schema import ModelfitConfig
from modelfit.factory import create_resolver
from modelfit.gpu.profile import CapabilityProfile
from modelfit.gpu.resolver import GPUResolver

console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging (no-op if ``--verbose`` already did)."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)


def load_cli_config(config_path: str | None) -> ModelfitConfig:
    """Load config for a command, exiting with status 1 if it is invalid."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        raise typer.Exit(1) from e

    configure_logging(config.logging.level)
    return config


def build_resolver(config: ModelfitConfig) -> GPUResolver:
    """Create the resolver, exiting with status 1 if the database is unreadable."""
    try:
        return create_resolver(config)
    except (OSError, ValueError) as e:
        console.print(f"[red]Failed to load GPU database: {e}[/red]")
        raise typer.Exit(1) from e


def format_memory(profile: CapabilityProfile) -> str:
    kind = "unified" if profile.memory.is_unified else "VRAM"
    text = f"{profile.memory_mb} MB {kind}"
    if profile.memory.memory_type:
        text += f" ({profile.memory.memory_type})"
    return text


def profile_table(gpu_name: str, profile: CapabilityProfile, match_key: str | None) -> Table:
    """Render a capability profile; ``match_key=None`` marks an estimate."""
    table = Table(title="GPU Profile", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="white")
    table.add_column("Value")

    table.add_row("GPU", gpu_name)
    if match_key is None:
        table.add_row("Source", "[yellow]estimated[/yellow]")
    else:
        table.add_row("Source", f"[green]database[/green] ({match_key})")
    table.add_row("Vendor", profile.vendor.value)
    table.add_row("Platform", profile.platform.value)
    table.add_row("Memory", format_memory(profile))
    table.add_row("Tier", str(profile.tier))
    if match_key is not None:
        table.add_row("FPS", str(profile.fps))
    if profile.architecture:
        table.add_row("Architecture", profile.architecture)
    if profile.year:
        table.add_row("Year", str(profile.year))
    return table
