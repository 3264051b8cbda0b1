"""Expense models.

Documents live in the ``expenses`` collection:

    {
        "_id": ObjectId,
        "user": "<owner id>",
        "title": "Lunch",
        "amount": 12.5,
        "category": "Food",
        "date": datetime  # naive UTC
    }
"""
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

DEFAULT_CATEGORY = "General"

EXPENSE_FIELDS = ("title", "amount", "category", "date")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class PayloadError(ValueError):
    """Raised when a request payload field cannot be coerced."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_title(value: Any) -> str:
    if not isinstance(value, str):
        raise PayloadError("title must be a string")
    return value


def parse_category(value: Any) -> str:
    if not isinstance(value, str):
        raise PayloadError("category must be a string")
    return value


def parse_amount(value: Any):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise PayloadError("amount must be a number")
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            raise PayloadError("amount must be a number") from None
        value = int(number) if number.is_integer() and "." not in value else number
    elif not isinstance(value, (int, float)):
        raise PayloadError("amount must be a number")

    if isinstance(value, float) and not math.isfinite(value):
        raise PayloadError("amount must be a finite number")
    # BSON integers are 64-bit
    if isinstance(value, int) and not INT64_MIN <= value <= INT64_MAX:
        raise PayloadError("amount is out of range")
    return value


def parse_date(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp into a naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise PayloadError("date must be an ISO-8601 timestamp") from None
    else:
        raise PayloadError("date must be an ISO-8601 timestamp")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


_PARSERS = {
    "title": parse_title,
    "amount": parse_amount,
    "category": parse_category,
    "date": parse_date,
}


@dataclass
class Expense:
    user: str
    title: str
    amount: float
    category: str = DEFAULT_CATEGORY
    date: datetime = field(default_factory=utcnow)
    id: Optional[str] = None

    @classmethod
    def from_payload(cls, user_id: str, payload: Optional[Dict[str, Any]]) -> "Expense":
        """
        Build a new expense owned by ``user_id`` from a request body.

        Any ``user`` key in the payload is ignored.

        Raises:
            PayloadError: if a required field is missing or a field is malformed
        """
        payload = payload or {}
        for required in ("title", "amount"):
            if payload.get(required) is None:
                raise PayloadError(f"{required} is required")

        values = {}
        for name in EXPENSE_FIELDS:
            if payload.get(name) is not None:
                values[name] = _PARSERS[name](payload[name])
        return cls(user=str(user_id), **values)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Expense":
        return cls(
            id=str(doc["_id"]),
            user=str(doc.get("user")),
            title=doc.get("title"),
            amount=doc.get("amount"),
            category=doc.get("category"),
            date=doc.get("date"),
        )

    def to_document(self) -> Dict[str, Any]:
        """Fields to insert; ``_id`` is left for the store to assign."""
        return {
            "user": self.user,
            "title": self.title,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "user": self.user,
            "title": self.title,
            "amount": self.amount,
            "category": self.category,
            "date": self.date.isoformat() if isinstance(self.date, datetime) else self.date,
        }


_ABSENT = object()


@dataclass
class ExpensePatch:
    """
    Partial update for an expense.

    Each field is either absent (left untouched) or carries a value, so
    ``amount=0`` or ``title=""`` are real updates rather than omissions.
    """
    title: Any = _ABSENT
    amount: Any = _ABSENT
    category: Any = _ABSENT
    date: Any = _ABSENT

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "ExpensePatch":
        """
        Collect the recognised keys present in ``payload``. Unknown keys are ignored.

        Raises:
            PayloadError: if a present field is null or malformed
        """
        payload = payload or {}
        values = {}
        for name in EXPENSE_FIELDS:
            if name not in payload:
                continue
            if payload[name] is None:
                raise PayloadError(f"{name} cannot be null")
            values[name] = _PARSERS[name](payload[name])
        return cls(**values)

    def changes(self) -> Dict[str, Any]:
        """The ``$set`` document for the present fields."""
        return {
            name: getattr(self, name)
            for name in EXPENSE_FIELDS
            if getattr(self, name) is not _ABSENT
        }

    def is_empty(self) -> bool:
        return not self.changes()
