"""fintrack - track income, expenses and monthly category budgets."""

__version__ = "0.1.0"
