"""Admin commands for init, first launch, clearing history, and theme."""

import asyncio
import sqlite3
import sys
from pathlib import Path

import typer
from rich.panel import Panel

from easymoney.commands.common import console, open_ledger, open_storage, render_month, resolve_db_path
from easymoney.config import create_default_config, get_config_path
from easymoney.dates import current_month
from easymoney.preferences import ThemeMode, check_first_launch, get_theme, toggle_theme
from easymoney.store.kv import StorageError
from easymoney.store.schema import init_database


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize easymoney database and configuration."""
    config_path = get_config_path()
    db_path = resolve_db_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'easymoney init --force' to overwrite the config[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def start_command() -> None:
    """Show the welcome screen on first launch, otherwise the current month."""

    async def run() -> None:
        storage = open_storage()
        if await check_first_launch(storage):
            console.print(
                Panel.fit(
                    "[bold]EasyMoney![/bold]\n[dim]Keep track of your cash[/dim]",
                    border_style="magenta",
                )
            )
            console.print("Add your first transaction with [cyan]easymoney add DESCRIPTION AMOUNT[/cyan]")
            return

        ledger = await open_ledger(storage)
        render_month(ledger, current_month())

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Storage error: {e}[/red]", style="bold")
        sys.exit(1)


def clear_command(yes: bool = False) -> None:
    """Delete the whole transaction history after confirmation."""
    if not yes:
        confirmed = typer.confirm(
            "Delete the whole transaction history? This cannot be undone.",
            default=False,
        )
        if not confirmed:
            console.print("[dim]Cancelled[/dim]")
            return

    async def run() -> None:
        ledger = await open_ledger()
        await ledger.clear_all()

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Could not clear history: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction history deleted")


def theme_command(mode: str | None = None, toggle: bool = False) -> None:
    """Show, set or toggle the colour theme."""
    if toggle and mode is not None:
        console.print("[red]Give either a theme or --toggle, not both[/red]")
        sys.exit(1)

    if mode is None and not toggle:
        console.print(f"Theme: {get_theme().value}")
        return

    if mode is not None:
        try:
            requested = ThemeMode(mode.strip().lower())
        except ValueError:
            console.print(f"[red]Unknown theme: {mode} (use 'light' or 'dark')[/red]")
            sys.exit(1)
    else:
        requested = ThemeMode.LIGHT if get_theme() is ThemeMode.DARK else ThemeMode.DARK

    try:
        selected = toggle_theme(requested is ThemeMode.DARK)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Theme set to {selected.value}")
