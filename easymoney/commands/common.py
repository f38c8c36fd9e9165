"""Shared helpers for CLI commands: opening the ledger, parsing input, rendering."""

import os
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from easymoney.config import get_setting
from easymoney.dates import current_month, month_label, parse_month
from easymoney.domain.models import Month
from easymoney.domain.transactions import TransactionType, format_money_display
from easymoney.preferences import ThemeMode, get_theme
from easymoney.store.kv import KeyValueStore, SqliteKeyValueStore
from easymoney.store.ledger import LedgerStore
from easymoney.store.schema import DB_PATH_ENV, database_exists, get_db_path, init_database

console = Console()

THEME_STYLES: dict[ThemeMode, dict[str, str]] = {
    ThemeMode.LIGHT: {
        "title": "bold magenta",
        "header": "bold white on dark_violet",
        "income": "green",
        "expense": "red",
        "muted": "grey50",
    },
    ThemeMode.DARK: {
        "title": "bold medium_purple1",
        "header": "bold medium_purple1",
        "income": "bright_green",
        "expense": "bright_red",
        "muted": "grey62",
    },
}


def resolve_db_path() -> Path:
    """Database path: EASYMONEY_DB, then config (db_path), then the default location."""
    if os.environ.get(DB_PATH_ENV):
        return get_db_path()
    configured = get_setting("db_path")
    if configured:
        return Path(configured).expanduser()
    return get_db_path()


def open_storage(db_path: Path | None = None) -> SqliteKeyValueStore:
    """Open the key-value store, creating the database on first use."""
    if db_path is None:
        db_path = resolve_db_path()
    if not database_exists(db_path):
        init_database(db_path)
    return SqliteKeyValueStore(db_path)


async def open_ledger(storage: KeyValueStore | None = None) -> LedgerStore:
    """Create a ledger over storage and load it, warning about unreadable months."""
    if storage is None:
        storage = open_storage()
    ledger = LedgerStore(storage)
    failures = await ledger.load()
    for failure in failures:
        console.print(f"[yellow]Skipped unreadable data for {failure.month}: {failure.error}[/yellow]")
    return ledger


def resolve_month(month: str | None) -> Month:
    """Parse --month, defaulting to the current month. Exits on bad input."""
    if not month:
        return current_month()
    try:
        return parse_month(month)
    except ValueError:
        console.print(f"[red]Invalid month: {month} (expected YYYY-MM)[/red]")
        sys.exit(1)


def parse_date_input(text: str) -> datetime:
    """Parse a user-entered date.

    Args:
        text: Date such as 2024-03-05, 05/03/2024 or 5 March 2024.

    Returns:
        The parsed datetime.

    Raises:
        ValueError: If the text is not a recognizable date.
    """
    ts = pd.to_datetime(text, dayfirst=True)
    if pd.isna(ts):
        raise ValueError(f"Not a date: {text!r}")
    return ts.to_pydatetime()


def format_amount_input(amount: float) -> str:
    """Render a stored amount the way it would be typed (3.5, 2000)."""
    text = repr(float(amount))
    return text[:-2] if text.endswith(".0") else text


def render_month(ledger: LedgerStore, month: Month, theme: ThemeMode | None = None) -> None:
    """Print a month's transactions and balance."""
    styles = THEME_STYLES[theme or get_theme()]
    transactions = ledger.transactions_for_month(month)

    if not transactions:
        console.print(f"[{styles['muted']}]No transactions in {month_label(month)}[/{styles['muted']}]")
        console.print(f"[{styles['title']}]{ledger.balance_description(month)}[/{styles['title']}]")
        return

    table = Table(title=f"{month_label(month)} ({month})", title_style=styles["title"], header_style=styles["header"])
    table.add_column("#", justify="right", style=styles["muted"])
    table.add_column("Description")
    table.add_column("Type")
    table.add_column("Date", style=styles["muted"])
    table.add_column("Amount", justify="right")

    for number, txn in enumerate(transactions, start=1):
        style = styles["income"] if txn.type is TransactionType.INCOME else styles["expense"]
        table.add_row(
            str(number),
            escape(txn.description),
            f"[{style}]{txn.type.label}[/{style}]",
            txn.date.strftime("%Y-%m-%d"),
            f"[{style}]{format_money_display(txn.amount)}[/{style}]",
        )

    console.print(table)
    console.print(f"[{styles['title']}]{ledger.balance_description(month)}[/{styles['title']}]")
