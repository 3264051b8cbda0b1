"""Per-user expense records: models, service and HTTP routes."""

from .models import Expense, ExpensePatch, PayloadError
from .services import CategoryRename, ExpenseError, ExpenseService

__all__ = [
    "Expense",
    "ExpensePatch",
    "PayloadError",
    "CategoryRename",
    "ExpenseError",
    "ExpenseService",
]
