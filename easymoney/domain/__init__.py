"""Domain models and types for easymoney.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from easymoney.domain.models import Description, Month
from easymoney.domain.transactions import DecodeError, Transaction, TransactionType

__all__ = ["DecodeError", "Description", "Month", "Transaction", "TransactionType"]
