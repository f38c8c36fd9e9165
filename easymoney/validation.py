"""Input validation for transaction forms.

The ledger store performs no validation; every add or edit goes through
validate_transaction_input first and a failure blocks the mutation.
"""

import re
from dataclasses import dataclass

from easymoney.domain.models import Description
from easymoney.domain.transactions import TransactionType

AMOUNT_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")

MISSING_FIELDS_MESSAGE = "Please fill in the description and the amount."
INVALID_AMOUNT_MESSAGE = "The amount entered is invalid."
INVALID_TYPE_MESSAGE = "Choose exactly one of income or expense."


class ValidationError(ValueError):
    """Form input rejected before reaching the ledger."""


@dataclass(frozen=True)
class ValidatedInput:
    """Transaction fields that passed validation."""

    description: Description
    amount: float
    type: TransactionType


def is_valid_amount_format(text: str) -> bool:
    """Check that an amount is a plain decimal with at most two fraction digits.

    Args:
        text: Amount as typed by the user.

    Returns:
        True for inputs like "3", "3.5" or "3.50"; False for "3.505", "-3", "1e3".
    """
    return AMOUNT_PATTERN.match(text.strip()) is not None


def parse_amount(text: str) -> float:
    """Parse and validate an amount string.

    Args:
        text: Amount as typed by the user.

    Returns:
        The positive amount.

    Raises:
        ValidationError: If the amount is empty, malformed or zero.
    """
    if not text.strip():
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    if not is_valid_amount_format(text):
        raise ValidationError(INVALID_AMOUNT_MESSAGE)

    amount = float(text.strip())
    if amount <= 0:
        raise ValidationError(INVALID_AMOUNT_MESSAGE)
    return amount


def resolve_type(is_income: bool, is_expense: bool) -> TransactionType:
    """Map the two category checkboxes to a single type.

    Raises:
        ValidationError: If neither or both are selected.
    """
    if is_income == is_expense:
        raise ValidationError(INVALID_TYPE_MESSAGE)
    return TransactionType.INCOME if is_income else TransactionType.EXPENSE


def validate_transaction_input(
    description: str,
    amount_text: str,
    is_income: bool,
    is_expense: bool,
) -> ValidatedInput:
    """Validate a whole add/edit form.

    Args:
        description: Description text.
        amount_text: Amount as typed.
        is_income: Income selected.
        is_expense: Expense selected.

    Returns:
        The validated fields.

    Raises:
        ValidationError: With a message naming the first problem found.
    """
    if not description.strip():
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    amount = parse_amount(amount_text)
    txn_type = resolve_type(is_income, is_expense)

    return ValidatedInput(description=Description(description.strip()), amount=amount, type=txn_type)
