"""Error taxonomy for fintrack.

Every error the store or validation layer raises derives from FintrackError so
the CLI can report it as a user-facing message instead of a traceback.
"""


class FintrackError(Exception):
    """Base class for all user-presentable fintrack errors."""


class ValidationError(FintrackError):
    """One or more input fields violate a constraint."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class DuplicateBudgetError(FintrackError):
    """A budget for this month and category already exists."""

    def __init__(self, month: str, category: str) -> None:
        self.month = month
        self.category = category
        super().__init__(f"A budget for {category} in {month} already exists")


class NotFoundError(FintrackError):
    """An update or delete referenced a record that does not exist."""

    def __init__(self, kind: str, record_id: int) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.capitalize()} {record_id} not found")


class StoreUnavailableError(FintrackError):
    """The record store could not be opened or reached."""
