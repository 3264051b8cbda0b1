"""
Expense Service - per-user expense CRUD and bulk category rename.

Responsibilities:
- List a user's expenses, newest first
- Create expenses owned by the caller
- Fetch, partially update and delete a single expense after an ownership check
- Rename a category across all of a user's expenses in one store operation

Every operation returns ``(value, error)``. ``error`` is None on success,
otherwise an ExpenseError whose kind the routes map to a status code.
Store exceptions are not caught here.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from expense_api.expenses.models import Expense, ExpensePatch, PayloadError
from expense_api.utils.enums import ErrorKind
from expense_api.utils.permissions import is_owner
from expense_api.utils.validators import parse_object_id


@dataclass(frozen=True)
class ExpenseError:
    kind: ErrorKind
    message: str


EXPENSE_NOT_FOUND = ExpenseError(ErrorKind.NOT_FOUND, "Expense not found")
NOT_AUTHORIZED = ExpenseError(ErrorKind.NOT_AUTHORIZED, "Not authorized")


@dataclass(frozen=True)
class CategoryRename:
    old: str
    new: str
    matched: int


def category_pattern(name: str):
    """Case-insensitive pattern matching ``name`` exactly and literally."""
    # $ alone also matches before a trailing newline
    return re.compile("^" + re.escape(name) + r"$(?!\n)", re.IGNORECASE)


class ExpenseService:
    """Expense operations against an injected ``expenses`` collection."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def list_expenses(self, user_id: str) -> Tuple[List[Expense], Optional[ExpenseError]]:
        cursor = self.collection.find({"user": str(user_id)}).sort("date", DESCENDING)
        return [Expense.from_document(doc) for doc in cursor], None

    def create_expense(
        self,
        user_id: str,
        payload: Optional[Dict[str, Any]]
    ) -> Tuple[Optional[Expense], Optional[ExpenseError]]:
        try:
            expense = Expense.from_payload(user_id, payload)
        except PayloadError as e:
            return None, ExpenseError(ErrorKind.VALIDATION, str(e))

        result = self.collection.insert_one(expense.to_document())
        expense.id = str(result.inserted_id)
        return expense, None

    def _get_owned(self, user_id: str, expense_id: str) -> Tuple[Optional[Dict], Optional[ExpenseError]]:
        """Fetch a document by id and check that ``user_id`` owns it."""
        oid = parse_object_id(expense_id)
        if oid is None:
            return None, EXPENSE_NOT_FOUND

        doc = self.collection.find_one({"_id": oid})
        if not doc:
            return None, EXPENSE_NOT_FOUND

        if not is_owner(user_id, doc):
            return None, NOT_AUTHORIZED

        return doc, None

    def get_expense(self, user_id: str, expense_id: str) -> Tuple[Optional[Expense], Optional[ExpenseError]]:
        doc, error = self._get_owned(user_id, expense_id)
        if error:
            return None, error
        return Expense.from_document(doc), None

    def update_expense(
        self,
        user_id: str,
        expense_id: str,
        payload: Optional[Dict[str, Any]]
    ) -> Tuple[Optional[Expense], Optional[ExpenseError]]:
        """
        Apply the fields present in ``payload`` to an expense the caller owns.

        A payload with no recognised fields leaves the document as it is.
        """
        try:
            patch = ExpensePatch.from_payload(payload)
        except PayloadError as e:
            return None, ExpenseError(ErrorKind.VALIDATION, str(e))

        doc, error = self._get_owned(user_id, expense_id)
        if error:
            return None, error

        if patch.is_empty():
            return Expense.from_document(doc), None

        updated = self.collection.find_one_and_update(
            {"_id": doc["_id"]},
            {"$set": patch.changes()},
            return_document=ReturnDocument.AFTER
        )
        if not updated:
            # Removed between the read and the write
            return None, EXPENSE_NOT_FOUND

        return Expense.from_document(updated), None

    def delete_expense(self, user_id: str, expense_id: str) -> Tuple[bool, Optional[ExpenseError]]:
        doc, error = self._get_owned(user_id, expense_id)
        if error:
            return False, error

        self.collection.find_one_and_delete({"_id": doc["_id"]})
        return True, None

    def rename_category(
        self,
        user_id: str,
        old_category: str,
        new_category: Any
    ) -> Tuple[Optional[CategoryRename], Optional[ExpenseError]]:
        """
        Rename ``old_category`` to ``new_category`` on all of the user's expenses.

        ``old_category`` matches case-insensitively and only as a whole name.
        Renaming onto an existing category merges the two.

        Returns:
            Tuple of (CategoryRename with the trimmed new name, error)
        """
        if not isinstance(new_category, str) or not new_category.strip():
            return None, ExpenseError(ErrorKind.VALIDATION, "New category name is required.")
        new_category = new_category.strip()

        result = self.collection.update_many(
            {"user": str(user_id), "category": category_pattern(old_category)},
            {"$set": {"category": new_category}}
        )

        if result.matched_count == 0:
            return None, ExpenseError(
                ErrorKind.NOT_FOUND,
                f"No expenses found with category '{old_category}' for this user."
            )

        return CategoryRename(old_category, new_category, result.matched_count), None
