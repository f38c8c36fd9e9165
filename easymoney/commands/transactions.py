"""Transaction commands (list, add, edit, delete, history, balance)."""

import asyncio
import sys
from datetime import datetime

import typer
from rich.markup import escape
from rich.table import Table

from easymoney.commands.common import (
    THEME_STYLES,
    console,
    format_amount_input,
    open_ledger,
    parse_date_input,
    render_month,
    resolve_month,
)
from easymoney.dates import month_label
from easymoney.domain.models import Month
from easymoney.domain.transactions import TransactionType, format_money_display
from easymoney.preferences import get_theme
from easymoney.store.kv import StorageError
from easymoney.store.ledger import LedgerChange, LedgerStore
from easymoney.validation import ValidationError, validate_transaction_input


def _rerender_on_change(ledger: LedgerStore) -> None:
    def on_change(change: LedgerChange) -> None:
        if change.month is not None:
            render_month(ledger, change.month)

    ledger.subscribe(on_change)


def _parse_date_or_exit(date: str | None, default: datetime) -> datetime:
    if not date:
        return default
    try:
        return parse_date_input(date)
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)


def _number_to_index(ledger: LedgerStore, number: int, month: Month) -> int:
    """Convert a 1-based list number to an index, exiting if it is out of range."""
    count = len(ledger.transactions_for_month(month))
    if not 1 <= number <= count:
        console.print(f"[red]No transaction #{number} in {month} ({count} recorded)[/red]")
        sys.exit(1)
    return number - 1


def list_command(month: str | None = None) -> None:
    """Show the transactions and balance of a month."""
    selected = resolve_month(month)

    async def run() -> None:
        ledger = await open_ledger()
        render_month(ledger, selected)

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Storage error: {e}[/red]", style="bold")
        sys.exit(1)


def balance_command(month: str | None = None) -> None:
    """Print the balance of a month."""
    selected = resolve_month(month)

    async def run() -> None:
        ledger = await open_ledger()
        console.print(ledger.balance_description(selected))

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Storage error: {e}[/red]", style="bold")
        sys.exit(1)


def add_command(
    description: str,
    amount: str,
    income: bool = False,
    expense: bool = False,
    date: str | None = None,
) -> None:
    """Add a transaction.

    Args:
        description: Transaction description.
        amount: Amount as typed (positive, at most two decimals).
        income: Record as income.
        expense: Record as expense (the default when neither flag is given).
        date: Transaction date; defaults to now.
    """
    try:
        validated = validate_transaction_input(description, amount, income, expense or not income)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    when = _parse_date_or_exit(date, datetime.now())

    async def run() -> None:
        ledger = await open_ledger()
        _rerender_on_change(ledger)
        await ledger.add(validated.description, validated.amount, validated.type, when)

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Could not save transaction: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(
        f"[green]✓[/green] Added {validated.type.label.lower()}: {escape(validated.description)} "
        f"{format_money_display(validated.amount)}"
    )


def edit_command(
    number: int,
    month: str | None = None,
    description: str | None = None,
    amount: str | None = None,
    income: bool = False,
    expense: bool = False,
    date: str | None = None,
) -> None:
    """Edit a transaction, keeping any field that is not given.

    Args:
        number: Transaction number as shown by 'easymoney list'.
        month: Month holding the transaction (YYYY-MM); defaults to current.
        description: New description.
        amount: New amount as typed.
        income: Change to income.
        expense: Change to expense.
        date: New date.
    """
    selected = resolve_month(month)

    async def run() -> None:
        ledger = await open_ledger()
        index = _number_to_index(ledger, number, selected)
        current = ledger.transactions_for_month(selected)[index]

        is_income, is_expense = income, expense
        if not income and not expense:
            is_income = current.type is TransactionType.INCOME
            is_expense = not is_income

        try:
            validated = validate_transaction_input(
                description if description is not None else current.description,
                amount if amount is not None else format_amount_input(current.amount),
                is_income,
                is_expense,
            )
        except ValidationError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

        when = _parse_date_or_exit(date, current.date)

        _rerender_on_change(ledger)
        await ledger.update(index, validated.description, validated.amount, validated.type, when, selected)
        console.print(f"[green]✓[/green] Updated transaction #{number}")

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Could not save transaction: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(number: int, month: str | None = None, yes: bool = False) -> None:
    """Delete a transaction after confirmation.

    Args:
        number: Transaction number as shown by 'easymoney list'.
        month: Month holding the transaction (YYYY-MM); defaults to current.
        yes: Skip the confirmation prompt.
    """
    selected = resolve_month(month)

    async def run() -> None:
        ledger = await open_ledger()
        index = _number_to_index(ledger, number, selected)
        txn = ledger.transactions_for_month(selected)[index]

        if not yes:
            confirmed = typer.confirm(
                f"Delete '{txn.description}' ({format_money_display(txn.amount)})? This cannot be undone.",
                default=False,
            )
            if not confirmed:
                console.print("[dim]Cancelled[/dim]")
                return

        _rerender_on_change(ledger)
        await ledger.delete(index, selected)
        console.print(f"[green]✓[/green] Deleted: {escape(txn.description)}")

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Could not save deletion: {e}[/red]", style="bold")
        sys.exit(1)


def history_command(pick: bool = False) -> None:
    """List months with recorded transactions, optionally picking one to show."""

    async def run() -> None:
        ledger = await open_ledger()
        months = ledger.months()

        if not months:
            console.print("[yellow]No transactions found[/yellow]")
            return

        styles = THEME_STYLES[get_theme()]
        table = Table(title="History", title_style=styles["title"], header_style=styles["header"])
        table.add_column("#", justify="right", style=styles["muted"])
        table.add_column("Month")
        table.add_column("Transactions", justify="right")
        table.add_column("Balance", justify="right")

        for number, month in enumerate(months, start=1):
            total = ledger.total_for_month(month)
            style = styles["expense"] if round(total, 2) < 0 else styles["income"]
            table.add_row(
                str(number),
                f"{month_label(month)} ({month})",
                str(len(ledger.transactions_for_month(month))),
                f"[{style}]{format_money_display(total)}[/{style}]",
            )

        console.print(table)

        if pick:
            choice = typer.prompt("Select a month", type=int)
            if not 1 <= choice <= len(months):
                console.print(f"[red]No month #{choice}[/red]")
                sys.exit(1)
            render_month(ledger, months[choice - 1])

    try:
        asyncio.run(run())
    except StorageError as e:
        console.print(f"[red]Storage error: {e}[/red]", style="bold")
        sys.exit(1)
