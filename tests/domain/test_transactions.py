"""Tests for easymoney.domain.transactions pure functions."""

import json
from datetime import datetime

import pytest

from easymoney.domain.models import Description
from easymoney.domain.transactions import (
    DecodeError,
    Transaction,
    TransactionType,
    calculate_balance,
    decode_transactions,
    encode_transactions,
    format_balance_description,
    format_money_display,
    format_timestamp,
)


def make_txn(amount: float, txn_type: TransactionType, description: str = "Item") -> Transaction:
    return Transaction(
        description=Description(description),
        amount=amount,
        type=txn_type,
        date=datetime(2024, 3, 5),
    )


class TestToRecord:
    """Tests for Transaction.to_record."""

    def test_record_fields(self) -> None:
        """Should encode type as its integer tag and date as ISO with milliseconds."""
        txn = Transaction(
            description=Description("Salary"),
            amount=2500.0,
            type=TransactionType.INCOME,
            date=datetime(2024, 3, 1),
        )

        assert txn.to_record() == {
            "description": "Salary",
            "amount": 2500.0,
            "type": 0,
            "date": "2024-03-01T00:00:00.000",
        }

    def test_expense_tag(self) -> None:
        """Should encode expense as 1."""
        assert make_txn(3.5, TransactionType.EXPENSE).to_record()["type"] == 1

    def test_encode_matches_stored_format(self) -> None:
        """Should produce the JSON array stored per month."""
        txn = Transaction(
            description=Description("Salary"),
            amount=2500.0,
            type=TransactionType.INCOME,
            date=datetime(2024, 3, 1),
        )

        payload = json.loads(encode_transactions([txn]))

        assert payload == [{"description": "Salary", "amount": 2500.0, "type": 0, "date": "2024-03-01T00:00:00.000"}]


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_whole_seconds(self) -> None:
        """Should always include milliseconds."""
        assert format_timestamp(datetime(2024, 3, 5, 14, 30)) == "2024-03-05T14:30:00.000"

    def test_milliseconds(self) -> None:
        """Should keep millisecond precision."""
        assert format_timestamp(datetime(2024, 3, 5, 14, 30, 1, 250000)) == "2024-03-05T14:30:01.250"

    def test_microseconds_kept(self) -> None:
        """Should not drop sub-millisecond precision."""
        assert format_timestamp(datetime(2024, 3, 5, 14, 30, 1, 250001)) == "2024-03-05T14:30:01.250001"


class TestFromRecord:
    """Tests for Transaction.from_record."""

    def test_decodes_valid_record(self) -> None:
        """Should rebuild all fields."""
        txn = Transaction.from_record(
            {"description": "Salary", "amount": 2500.0, "type": 0, "date": "2024-03-01T00:00:00.000"}
        )

        assert txn.description == "Salary"
        assert txn.amount == 2500.0
        assert txn.type is TransactionType.INCOME
        assert txn.date == datetime(2024, 3, 1)

    def test_integer_amount_becomes_float(self) -> None:
        """Should accept JSON integers for amount."""
        txn = Transaction.from_record({"description": "Rent", "amount": 800, "type": 1, "date": "2024-03-01"})

        assert txn.amount == 800.0
        assert isinstance(txn.amount, float)

    def test_round_trip(self) -> None:
        """Should decode an encoded transaction to an equal value."""
        original = Transaction(
            description=Description("Coffee"),
            amount=3.5,
            type=TransactionType.EXPENSE,
            date=datetime(2024, 3, 5, 8, 15, 30, 123000),
        )

        assert Transaction.from_record(original.to_record()) == original

    def test_out_of_range_tag(self) -> None:
        """Should reject an unknown category tag."""
        with pytest.raises(DecodeError):
            Transaction.from_record({"description": "X", "amount": 1.0, "type": 2, "date": "2024-03-01"})

    def test_negative_tag(self) -> None:
        """Should reject a negative category tag."""
        with pytest.raises(DecodeError):
            Transaction.from_record({"description": "X", "amount": 1.0, "type": -1, "date": "2024-03-01"})

    def test_missing_field(self) -> None:
        """Should reject a record without a date."""
        with pytest.raises(DecodeError, match="date"):
            Transaction.from_record({"description": "X", "amount": 1.0, "type": 0})

    def test_mistyped_amount(self) -> None:
        """Should reject a string amount."""
        with pytest.raises(DecodeError):
            Transaction.from_record({"description": "X", "amount": "1.0", "type": 0, "date": "2024-03-01"})

    def test_boolean_amount(self) -> None:
        """Should reject a boolean amount."""
        with pytest.raises(DecodeError):
            Transaction.from_record({"description": "X", "amount": True, "type": 0, "date": "2024-03-01"})

    def test_mistyped_description(self) -> None:
        """Should reject a non-string description."""
        with pytest.raises(DecodeError):
            Transaction.from_record({"description": 5, "amount": 1.0, "type": 0, "date": "2024-03-01"})

    def test_unparsable_date(self) -> None:
        """Should reject a date that is not ISO-8601."""
        with pytest.raises(DecodeError):
            Transaction.from_record({"description": "X", "amount": 1.0, "type": 0, "date": "yesterday"})

    def test_not_an_object(self) -> None:
        """Should reject a non-object record."""
        with pytest.raises(DecodeError):
            Transaction.from_record(["X", 1.0, 0, "2024-03-01"])


class TestDecodeTransactions:
    """Tests for decode_transactions."""

    def test_decodes_list_in_order(self) -> None:
        """Should keep stored order."""
        text = json.dumps(
            [
                {"description": "First", "amount": 1.0, "type": 1, "date": "2024-03-01T00:00:00.000"},
                {"description": "Second", "amount": 2.0, "type": 0, "date": "2024-03-02T00:00:00.000"},
            ]
        )

        result = decode_transactions(text)

        assert [t.description for t in result] == ["First", "Second"]

    def test_round_trip_list(self) -> None:
        """Should decode an encoded list to equal values."""
        txns = [make_txn(3.5, TransactionType.EXPENSE, "Coffee"), make_txn(2000.0, TransactionType.INCOME, "Salary")]

        assert decode_transactions(encode_transactions(txns)) == txns

    def test_empty_list(self) -> None:
        """Should decode an empty month."""
        assert decode_transactions("[]") == []

    def test_invalid_json(self) -> None:
        """Should raise DecodeError for malformed JSON."""
        with pytest.raises(DecodeError):
            decode_transactions("[{")

    def test_not_a_list(self) -> None:
        """Should raise DecodeError for a top-level object."""
        with pytest.raises(DecodeError):
            decode_transactions('{"description": "X"}')

    def test_one_bad_record_fails_whole_month(self) -> None:
        """Should fail the month if any record is invalid."""
        text = json.dumps(
            [
                {"description": "Good", "amount": 1.0, "type": 1, "date": "2024-03-01"},
                {"description": "Bad", "amount": 1.0, "type": 2, "date": "2024-03-01"},
            ]
        )

        with pytest.raises(DecodeError):
            decode_transactions(text)


class TestCalculateBalance:
    """Tests for calculate_balance."""

    def test_income_minus_expense(self) -> None:
        """Should subtract expenses from income."""
        txns = [make_txn(3.5, TransactionType.EXPENSE), make_txn(2000.0, TransactionType.INCOME)]

        assert calculate_balance(txns) == pytest.approx(1996.5)

    def test_empty(self) -> None:
        """Should be zero with no transactions."""
        assert calculate_balance([]) == 0.0

    def test_only_expenses(self) -> None:
        """Should go negative with only expenses."""
        txns = [make_txn(10.0, TransactionType.EXPENSE), make_txn(5.25, TransactionType.EXPENSE)]

        assert calculate_balance(txns) == pytest.approx(-15.25)


class TestFormatMoneyDisplay:
    """Tests for format_money_display."""

    def test_thousands_separator(self) -> None:
        """Should format like en_US currency."""
        assert format_money_display(1996.5) == "$1,996.50"

    def test_negative(self) -> None:
        """Should put the sign before the symbol."""
        assert format_money_display(-3.5) == "-$3.50"

    def test_zero(self) -> None:
        """Should format zero without sign."""
        assert format_money_display(0.0) == "$0.00"

    def test_tiny_negative_is_unsigned(self) -> None:
        """Should not print -$0.00."""
        assert format_money_display(-0.001) == "$0.00"

    def test_balance_description(self) -> None:
        """Should prefix the balance label."""
        assert format_balance_description(1996.5) == "Balance: $1,996.50"
