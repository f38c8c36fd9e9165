"""Domain type definitions for easymoney.

These NewTypes provide semantic clarity and help with type checking:
- Month: Month key in YYYY-MM format
- Description: Transaction description text
"""

from typing import NewType

# Month is always in YYYY-MM format (e.g., "2024-03")
Month = NewType("Month", str)

# Transaction description text
Description = NewType("Description", str)
