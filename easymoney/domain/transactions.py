"""Transaction value object, its JSON record codec and balance helpers.

This module contains the functional core for transaction operations:
- No I/O operations (no storage, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Amounts are floats in the unit of the currency (dollars), as persisted.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Iterable, TypedDict

from easymoney.domain.models import Description


class DecodeError(ValueError):
    """A persisted transaction record could not be decoded."""


class TransactionType(IntEnum):
    """Closed category tag. The integer value is the persisted tag."""

    INCOME = 0
    EXPENSE = 1

    @property
    def label(self) -> str:
        return "Income" if self is TransactionType.INCOME else "Expense"


class TransactionRecord(TypedDict):
    """Serialized transaction as stored inside a month value."""

    description: str
    amount: float
    type: int
    date: str


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction data."""

    description: Description
    amount: float
    type: TransactionType
    date: datetime

    def to_record(self) -> TransactionRecord:
        """Convert to a JSON-ready record."""
        return TransactionRecord(
            description=self.description,
            amount=float(self.amount),
            type=int(self.type),
            date=format_timestamp(self.date),
        )

    @staticmethod
    def from_record(record: Any) -> "Transaction":
        """Rebuild a transaction from a record.

        Args:
            record: Mapping with description, amount, type and date fields.

        Returns:
            The decoded transaction.

        Raises:
            DecodeError: If a field is missing or mistyped, the date is
                unparsable, or the type tag is out of range.
        """
        if not isinstance(record, dict):
            raise DecodeError(f"Expected a transaction object, got {type(record).__name__}")

        missing = [name for name in ("description", "amount", "type", "date") if name not in record]
        if missing:
            raise DecodeError(f"Missing field(s): {', '.join(missing)}")

        description = record["description"]
        amount = record["amount"]
        tag = record["type"]
        raw_date = record["date"]

        if not isinstance(description, str):
            raise DecodeError("Field 'description' must be a string")
        # bool is an int subclass; a JSON true/false is never a valid amount or tag
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise DecodeError("Field 'amount' must be a number")
        if isinstance(tag, bool) or not isinstance(tag, int):
            raise DecodeError("Field 'type' must be an integer")
        if not isinstance(raw_date, str):
            raise DecodeError("Field 'date' must be a string")

        try:
            txn_type = TransactionType(tag)
        except ValueError as e:
            raise DecodeError(f"Unknown transaction type tag: {tag}") from e

        try:
            date = datetime.fromisoformat(raw_date)
        except ValueError as e:
            raise DecodeError(f"Unparsable date: {raw_date!r}") from e

        return Transaction(
            description=Description(description),
            amount=float(amount),
            type=txn_type,
            date=date,
        )


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 with millisecond precision.

    Microseconds are kept when they are not a whole number of milliseconds.

    Args:
        value: Datetime to format.

    Returns:
        String like "2024-03-01T00:00:00.000".
    """
    timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
    return value.isoformat(timespec=timespec)


def encode_transactions(transactions: Iterable[Transaction]) -> str:
    """Serialize a month's transactions to a JSON array string."""
    return json.dumps([txn.to_record() for txn in transactions])


def decode_transactions(text: str) -> list[Transaction]:
    """Parse a month value back into transactions.

    Args:
        text: JSON array of transaction records.

    Returns:
        Transactions in stored order.

    Raises:
        DecodeError: If the text is not a JSON array of valid records.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array, got {type(payload).__name__}")

    return [Transaction.from_record(item) for item in payload]


def calculate_balance(transactions: Iterable[Transaction]) -> float:
    """Calculate income minus expenses.

    Args:
        transactions: Transactions to total.

    Returns:
        Income total minus expense total (0.0 for no transactions).
    """
    total_income = 0.0
    total_expense = 0.0
    for txn in transactions:
        if txn.type is TransactionType.INCOME:
            total_income += txn.amount
        else:
            total_expense += txn.amount
    return total_income - total_expense


def format_money_display(amount: float, symbol: str = "$") -> str:
    """Format money amount for display.

    Args:
        amount: Amount in currency units.
        symbol: Currency symbol.

    Returns:
        Formatted string (e.g., "$1,996.50" or "-$3.50").
    """
    formatted = f"{symbol}{abs(amount):,.2f}"
    # amounts that round to zero print unsigned
    if round(amount, 2) < 0:
        return f"-{formatted}"
    return formatted


def format_balance_description(balance: float) -> str:
    """Format the balance header line (e.g., "Balance: $1,996.50")."""
    return f"Balance: {format_money_display(balance)}"
