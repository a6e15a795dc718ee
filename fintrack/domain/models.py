"""Domain type definitions for fintrack.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- Month: Month in YYYY-MM format
- CategoryName: Name of a spending or income category
"""

from typing import NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Free-text category label, never a closed set
CategoryName = NewType("CategoryName", str)

UNCATEGORIZED = CategoryName("Uncategorized")
