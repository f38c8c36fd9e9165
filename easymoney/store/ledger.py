"""Monthly ledger store.

Holds transactions grouped by month key and writes each month through a
KeyValueStore under its own key ("transactions_YYYY-MM"). In-memory state is
updated before the write is awaited, so memory is never behind storage. A
failed write leaves memory changed and raises PersistWriteError.

Transactions are addressed by position within their month, so an index is
only valid against the list it was read from.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from easymoney.dates import month_key, parse_month
from easymoney.domain.models import Description, Month
from easymoney.domain.transactions import (
    DecodeError,
    Transaction,
    TransactionType,
    calculate_balance,
    decode_transactions,
    encode_transactions,
    format_balance_description,
)
from easymoney.logging_setup import get_logger
from easymoney.store.kv import KeyValueStore, PersistWriteError

logger = get_logger(__name__)

TRANSACTIONS_PREFIX = "transactions_"


def storage_key(month: Month) -> str:
    """Persisted key for a month (e.g., "transactions_2024-03")."""
    return f"{TRANSACTIONS_PREFIX}{month}"


def _month_from_key(key: str) -> Month | None:
    """Month named by a transactions key, or None unless it is exactly YYYY-MM."""
    suffix = key[len(TRANSACTIONS_PREFIX) :]
    try:
        month = parse_month(suffix)
    except ValueError:
        return None
    return month if month == suffix else None


class LedgerState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class LedgerChange:
    """Notification sent to subscribers after every state change."""

    kind: str  # loaded, added, updated, deleted, cleared or refreshed
    month: Month | None = None


@dataclass(frozen=True)
class LoadFailure:
    """A persisted month that could not be decoded during load."""

    key: str
    month: Month
    error: DecodeError


Listener = Callable[[LedgerChange], None]


class LedgerStore:
    """In-memory ledger of transactions per month, persisted month by month."""

    def __init__(self, storage: KeyValueStore):
        self._storage = storage
        self._months: dict[Month, list[Transaction]] = {}
        self._listeners: list[Listener] = []
        self.state = LedgerState.UNINITIALIZED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.

        Args:
            listener: Called with a LedgerChange after each mutation.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: str, month: Month | None = None) -> None:
        change = LedgerChange(kind=kind, month=month)
        for listener in list(self._listeners):
            listener(change)

    async def load(self) -> list[LoadFailure]:
        """Populate the ledger from every persisted month.

        A month whose value does not decode is skipped and reported; the rest
        still load. Keys whose suffix is not a YYYY-MM month are ignored. The
        ledger ends READY even if storage raises.

        Returns:
            One LoadFailure per undecodable month (empty when all loaded).
        """
        self.state = LedgerState.LOADING
        failures: list[LoadFailure] = []

        try:
            keys = await self._storage.get_all_keys()
            for key in sorted(keys):
                if not key.startswith(TRANSACTIONS_PREFIX):
                    continue

                month = _month_from_key(key)
                if month is None:
                    logger.warning("Ignoring %s: not a YYYY-MM month key", key)
                    continue

                text = await self._storage.get_string(key)
                if text is None:
                    continue

                try:
                    self._months[month] = decode_transactions(text)
                except DecodeError as e:
                    self._months.pop(month, None)
                    logger.warning("Skipping %s: %s", key, e)
                    failures.append(LoadFailure(key=key, month=month, error=e))
        finally:
            self.state = LedgerState.READY

        logger.debug("Loaded %d month(s), %d failure(s)", len(self._months), len(failures))
        self._notify("loaded")
        return failures

    async def save(self, month: Month) -> None:
        """Write a month's current list (empty if absent) to storage.

        Raises:
            PersistWriteError: If the storage write fails.
        """
        key = storage_key(month)
        text = encode_transactions(self._months.get(month, []))
        if not await self._storage.set_string(key, text):
            raise PersistWriteError(f"Storage rejected write of {key!r}")

    async def _persist_and_notify(self, kind: str, month: Month) -> None:
        try:
            await self.save(month)
        finally:
            self._notify(kind, month)

    async def add(
        self,
        description: Description,
        amount: float,
        txn_type: TransactionType,
        date: datetime,
    ) -> Transaction:
        """Append a transaction to the month of its date.

        Returns:
            The stored transaction.
        """
        month = month_key(date)
        transaction = Transaction(description=description, amount=amount, type=txn_type, date=date)
        self._months.setdefault(month, []).append(transaction)
        await self._persist_and_notify("added", month)
        return transaction

    def _check_index(self, index: int, month: Month) -> list[Transaction]:
        transactions = self._months.get(month)
        if transactions is None or not 0 <= index < len(transactions):
            size = 0 if transactions is None else len(transactions)
            raise IndexError(f"No transaction at index {index} in {month} ({size} held)")
        return transactions

    async def update(
        self,
        index: int,
        description: Description,
        amount: float,
        txn_type: TransactionType,
        date: datetime,
        month: Month,
    ) -> Transaction:
        """Replace the transaction at index within month.

        The replacement stays in month even when date falls in another month.

        Raises:
            IndexError: If month has no transaction at index.
        """
        transactions = self._check_index(index, month)
        transaction = Transaction(description=description, amount=amount, type=txn_type, date=date)
        transactions[index] = transaction
        await self._persist_and_notify("updated", month)
        return transaction

    async def delete(self, index: int, month: Month) -> Transaction:
        """Remove the transaction at index within month.

        Returns:
            The removed transaction.

        Raises:
            IndexError: If month has no transaction at index.
        """
        transactions = self._check_index(index, month)
        removed = transactions.pop(index)
        await self._persist_and_notify("deleted", month)
        return removed

    async def clear_all(self) -> None:
        """Remove every persisted month and empty the ledger. Irreversible."""
        self._months.clear()
        try:
            keys = await self._storage.get_all_keys()
            for key in sorted(keys):
                if key.startswith(TRANSACTIONS_PREFIX):
                    await self._storage.remove_key(key)
        finally:
            self._notify("cleared")

    def refresh(self) -> None:
        """Notify subscribers without changing anything."""
        self._notify("refreshed")

    def transactions_for_month(self, month: Month) -> list[Transaction]:
        """Copy of a month's transactions in insertion order ([] if absent)."""
        return list(self._months.get(month, []))

    def total_for_month(self, month: Month) -> float:
        """Income minus expenses for month (0.0 if absent)."""
        return calculate_balance(self._months.get(month, []))

    def balance_description(self, month: Month) -> str:
        """Balance header for month (e.g., "Balance: $1,996.50")."""
        return format_balance_description(self.total_for_month(month))

    def months(self) -> list[Month]:
        """Months currently held, newest first."""
        return sorted(self._months, reverse=True)
