"""Interactive chat REPL command."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from openai import OpenAIError
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from modelfit.cli.common import build_resolver, console, load_cli_config
from modelfit.factory import create_engine, create_policy
from modelfit.hardware.detect import HardwareInfo, probe_hardware
from modelfit.session.chats import ChatStore
from modelfit.session.context import SessionContext

if TYPE_CHECKING:
    from modelfit.catalog.candidate import TradeoffMode
    from modelfit.config.schema import ModelfitConfig
    from modelfit.gpu.resolver import GPUResolver

logger = logging.getLogger(__name__)


def chat_command(
    config_path: str | None = None,
    gpu: str | None = None,
    mode: TradeoffMode | None = None,
) -> None:
    """Select a model for this machine and chat with it.

    Args:
        config_path: Optional path to config file
        gpu: GPU name override
        mode: Trade-off mode override
    """
    config = load_cli_config(config_path)
    resolver = build_resolver(config)
    hardware = probe_hardware(
        resolver,
        gpu_name=gpu if gpu is not None else config.gpu.name,
        tier=config.gpu.tier,
    )
    store = ChatStore(config.storage.chats_path)

    asyncio.run(_async_chat(config, resolver, hardware, store, mode))


def _format_status(text: str, progress: float | None) -> str:
    if progress is None:
        return f"[bold green]{text}[/bold green]"
    return f"[bold green]{text}[/bold green] [dim]{progress:.0%}[/dim]"


async def _async_chat(
    config: ModelfitConfig,
    resolver: GPUResolver,
    hardware: HardwareInfo,
    store: ChatStore,
    mode: TradeoffMode | None,
) -> None:
    """Async chat loop."""
    session = SessionContext(config, create_policy(config, resolver), create_engine(config))

    with console.status(_format_status(session.status, None), spinner="dots") as status:
        session.on_status = lambda text, progress: status.update(_format_status(text, progress))
        await session.initialize(hardware.gpu_name, hardware.tier, mode)
    session.on_status = None

    if not session.ready:
        console.print(f"[red]{session.status}[/red]")
        return

    console.print(
        Panel.fit(
            f"[bold blue]modelfit chat[/bold blue]\n"
            f"GPU: {hardware.gpu_name or 'unknown'}\n"
            f"Model: {session.model_id}\n"
            f"Type /help for commands, /exit to quit",
            border_style="blue",
        )
    )

    while True:
        try:
            user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")

            if not user_input.strip():
                continue

            if user_input.startswith("/"):
                if _handle_slash_command(user_input, session, store):
                    break
                continue

            console.print("\n[bold green]assistant[/bold green]")
            async for delta in session.send(store, user_input):
                console.print(delta, end="", markup=False, highlight=False)
            console.print()

        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted[/yellow]")
            if Confirm.ask("Exit chat?", default=False):
                break
        except EOFError:
            break
        except OpenAIError as e:
            logger.error("Chat request failed: %s", e)
            console.print(f"\n[red]Error: {e}[/red]")

    console.print("\n[cyan]Goodbye![/cyan]")


def _handle_slash_command(command: str, session: SessionContext, store: ChatStore) -> bool:
    """Handle slash commands.

    Args:
        command: Command string starting with /
        session: Current session
        store: Chat history

    Returns:
        True if should exit chat loop
    """
    cmd, _, arg = command.strip().partition(" ")
    cmd = cmd.lower()

    if cmd in ("/exit", "/quit", "/q"):
        return True

    elif cmd == "/help":
        console.print("\n[bold]Available commands:[/bold]")
        console.print("  /help       - Show this help")
        console.print("  /exit       - Exit chat")
        console.print("  /new        - Start a new chat")
        console.print("  /chats      - List chats")
        console.print("  /switch ID  - Switch to another chat")
        console.print("  /model      - Show the selected model")
        console.print("  /clear      - Clear screen")

    elif cmd == "/new":
        chat = store.new_chat()
        console.print(f"[cyan]Started chat {chat.id}[/cyan]")

    elif cmd == "/chats":
        console.print("\n[bold]Chats:[/bold]")
        for chat in store.chats:
            marker = "*" if chat.id == store.current.id else " "
            console.print(f" {marker} {chat.id}  {chat.title} ({len(chat.messages)} messages)")

    elif cmd == "/switch":
        try:
            chat = store.select(arg.strip())
        except KeyError:
            console.print(f"[red]No chat with id {arg.strip()!r}[/red]")
        else:
            console.print(f"[cyan]Switched to chat {chat.id}[/cyan]")

    elif cmd == "/model":
        console.print(f"\n[cyan]Model:[/cyan] {session.model_id}")
        selection = session.selection
        if selection is not None and selection.budget_mb is not None:
            console.print(f"[cyan]Memory budget:[/cyan] {selection.budget_mb} MB")
        console.print(f"[cyan]Temperature:[/cyan] {session.config.engine.temperature}")
        console.print(f"[cyan]Max tokens:[/cyan] {session.config.engine.max_tokens}")

    elif cmd == "/clear":
        console.clear()

    else:
        console.print(f"[red]Unknown command: {command}[/red]")
        console.print("Type /help for available commands")

    return False
