"""Main CLI application using Typer."""

import logging
import sys

import typer
from rich.console import Console

from modelfit import __version__
from modelfit.catalog.candidate import TradeoffMode

app = typer.Typer(
    name="modelfit",
    help="modelfit - Pick the best local LLM your GPU can run",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """modelfit - Pick the best local LLM your GPU can run."""
    if verbose:
        from modelfit.cli.common import configure_logging

        configure_logging("DEBUG")
        logging.getLogger().setLevel(logging.DEBUG)


@app.command()
def version():
    """Show modelfit version."""
    console.print(f"modelfit version {__version__}")


@app.command()
def lookup(
    name: str = typer.Argument(..., help="GPU name, e.g. 'NVIDIA GeForce RTX 4090'"),
    tier: int = typer.Option(1, "--tier", "-t", min=0, max=3, help="Tier used for estimates"),
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Resolve a GPU name to a capability profile."""
    from modelfit.cli.gpu_cmd import lookup_command

    lookup_command(name=name, tier=tier, config_path=config_path)


@app.command()
def detect(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Probe this machine's GPU and show its profile."""
    from modelfit.cli.gpu_cmd import detect_command

    detect_command(config_path=config_path)


@app.command()
def models(
    budget: int = typer.Option(None, "--budget", "-b", min=1, help="Memory budget in MB"),
    mode: TradeoffMode = typer.Option(None, "--mode", "-m", help="Speed/quality trade-off"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Number of models shown"),
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Rank catalog models for a memory budget."""
    from modelfit.cli.select_cmd import models_command

    models_command(budget=budget, mode=mode, limit=limit, config_path=config_path)


@app.command()
def select(
    gpu: str = typer.Option(None, "--gpu", "-g", help="GPU name (probed if omitted)"),
    tier: int = typer.Option(None, "--tier", "-t", min=0, max=3, help="Performance tier"),
    mode: TradeoffMode = typer.Option(None, "--mode", "-m", help="Speed/quality trade-off"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Select the best model for a GPU."""
    from modelfit.cli.select_cmd import select_command

    select_command(gpu=gpu, tier=tier, mode=mode, as_json=as_json, config_path=config_path)


@app.command("build-db")
def build_db(
    corpus: str = typer.Argument(..., help="Directory of benchmark JSON files"),
    output: str = typer.Option(
        "gpu_database.json", "--output", "-o", help="Destination database file"
    ),
):
    """Build the GPU reference database from a benchmark corpus."""
    from modelfit.cli.gpu_cmd import build_db_command

    build_db_command(corpus=corpus, output=output)


@app.command()
def chat(
    config_path: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ~/.modelfit/modelfit.yaml)",
    ),
    gpu: str = typer.Option(None, "--gpu", "-g", help="GPU name (probed if omitted)"),
    mode: TradeoffMode = typer.Option(None, "--mode", "-m", help="Speed/quality trade-off"),
):
    """Select a model for this machine and start a chat session."""
    from modelfit.cli.chat import chat_command

    chat_command(config_path=config_path, gpu=gpu, mode=mode)


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
