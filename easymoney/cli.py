"""CLI entry point for easymoney."""

import typer

from easymoney.commands.admin import clear_command, init_command, start_command, theme_command
from easymoney.commands.transactions import (
    add_command,
    balance_command,
    delete_command,
    edit_command,
    history_command,
    list_command,
)
from easymoney.logging_setup import configure_logging

app = typer.Typer(
    name="easymoney",
    help="EasyMoney - keep track of your cash, month by month",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """EasyMoney - keep track of your cash, month by month."""
    configure_logging("DEBUG" if verbose else None)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize easymoney database and configuration."""
    init_command(force)


@app.command()
def start() -> None:
    """Open the app: welcome screen on first launch, then the current month."""
    start_command()


@app.command(name="list")
def list_transactions(
    month: str = typer.Option(None, "--month", "-m", help="Month to show (YYYY-MM, default: current)"),
) -> None:
    """List your transactions for a month."""
    list_command(month)


@app.command()
def add(
    description: str,
    amount: str,
    income: bool = typer.Option(False, "--income", "-i", help="Record as income"),
    expense: bool = typer.Option(False, "--expense", "-e", help="Record as expense (default)"),
    date: str = typer.Option(None, "--date", "-d", help="Transaction date (default: now)"),
) -> None:
    """Add an income or expense transaction."""
    add_command(description, amount, income, expense, date)


@app.command()
def edit(
    number: int,
    month: str = typer.Option(None, "--month", "-m", help="Month holding the transaction (YYYY-MM)"),
    description: str = typer.Option(None, "--description", help="New description"),
    amount: str = typer.Option(None, "--amount", help="New amount"),
    income: bool = typer.Option(False, "--income", "-i", help="Change to income"),
    expense: bool = typer.Option(False, "--expense", "-e", help="Change to expense"),
    date: str = typer.Option(None, "--date", "-d", help="New date"),
) -> None:
    """Edit a transaction by its number in 'easymoney list'."""
    edit_command(number, month, description, amount, income, expense, date)


@app.command()
def delete(
    number: int,
    month: str = typer.Option(None, "--month", "-m", help="Month holding the transaction (YYYY-MM)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a transaction by its number in 'easymoney list'."""
    delete_command(number, month, yes)


@app.command()
def history(
    pick: bool = typer.Option(False, "--pick", "-p", help="Pick a month to show"),
) -> None:
    """Show the months you have recorded, newest first."""
    history_command(pick)


@app.command()
def balance(
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Show the balance for a month."""
    balance_command(month)


@app.command()
def theme(
    mode: str = typer.Argument(None, help="'light' or 'dark'; omit to show the current theme"),
    toggle: bool = typer.Option(False, "--toggle", "-t", help="Switch between light and dark"),
) -> None:
    """Show or switch the colour theme."""
    theme_command(mode, toggle)


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete your whole transaction history."""
    clear_command(yes)


if __name__ == "__main__":
    app()
