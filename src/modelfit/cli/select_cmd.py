"""Catalog ranking and model selection commands."""

import asyncio
from datetime import datetime, timezone

from rich.panel import Panel
from rich.table import Table

from modelfit.catalog.candidate import ModelCandidate, TradeoffMode
from modelfit.cli.common import build_resolver, console, format_memory, load_cli_config
from modelfit.factory import create_policy, create_ranker
from modelfit.hardware.detect import probe_hardware


def _format_date(epoch_ms: int | None) -> str:
    if epoch_ms is None:
        return "-"
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def candidates_table(candidates: list[ModelCandidate], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Model", style="white")
    table.add_column("Params", justify="right")
    table.add_column("Memory", justify="right")
    table.add_column("Modified")
    table.add_column("Score", justify="right")

    for rank, candidate in enumerate(candidates, start=1):
        quality = candidate.quality_score
        table.add_row(
            str(rank),
            candidate.id,
            f"{candidate.params_b:g}B",
            f"{candidate.estimated_memory_mb:.0f} MB",
            _format_date(candidate.last_modified_ms),
            f"{quality:g}" if quality is not None else "-",
        )
    return table


def models_command(
    budget: int | None,
    mode: TradeoffMode | None,
    limit: int = 10,
    config_path: str | None = None,
) -> None:
    """Rank the live catalog for a memory budget.

    Args:
        budget: Memory budget in MB (no memory filter if None)
        mode: Trade-off mode (configured mode if None)
        limit: Number of models shown
        config_path: Optional path to config file
    """
    config = load_cli_config(config_path)
    mode = mode or config.selection.mode
    ranker = create_ranker(config)

    with console.status("[bold green]Fetching catalog...[/bold green]", spinner="dots"):
        ranked = list(asyncio.run(ranker.rank(budget, mode)))

    if not ranked:
        console.print("[yellow]No catalog models fit.[/yellow]")
        return

    budget_text = f"{budget} MB" if budget is not None else "no budget"
    title = f"Catalog models ({mode.value}, {budget_text})"
    console.print(candidates_table(ranked[:limit], title))
    if len(ranked) > limit:
        console.print(f"[dim]+{len(ranked) - limit} more[/dim]")


def select_command(
    gpu: str | None = None,
    tier: int | None = None,
    mode: TradeoffMode | None = None,
    as_json: bool = False,
    config_path: str | None = None,
) -> None:
    """Pick the model to load for a GPU.

    Args:
        gpu: GPU name (probed from the host if None)
        tier: Performance tier override
        mode: Trade-off mode (configured mode if None)
        as_json: Print the result as JSON
        config_path: Optional path to config file
    """
    config = load_cli_config(config_path)
    mode = mode or config.selection.mode
    resolver = build_resolver(config)

    hardware = probe_hardware(
        resolver,
        gpu_name=gpu if gpu is not None else config.gpu.name,
        tier=tier if tier is not None else config.gpu.tier,
    )
    policy = create_policy(config, resolver)

    with console.status("[bold green]Selecting model...[/bold green]", spinner="dots"):
        result = asyncio.run(policy.select(hardware.gpu_name, hardware.tier, mode))

    if as_json:
        console.print_json(data=result.to_dict())
        return

    if result.insufficient:
        console.print(f"[yellow]{result.status}[/yellow]")
        return

    lines = [
        f"[bold blue]{result.chosen_model_id}[/bold blue]",
        f"GPU: {hardware.gpu_name} (tier {hardware.tier})",
    ]
    if result.profile is not None:
        lines.append(f"Memory: {format_memory(result.profile)}")
    lines.append(f"Mode: {mode.value}")
    if result.used_fallback:
        lines.append("[yellow]Catalog unavailable or empty, using fallback models[/yellow]")

    console.print(Panel.fit("\n".join(lines), title="Selected model", border_style="blue"))
    console.print(candidates_table(result.candidates[:5], "Top candidates"))
