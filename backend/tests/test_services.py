from __future__ import annotations

from datetime import datetime

import mongomock
import pytest
from bson import ObjectId

from expense_api.expenses.services import CategoryRename, ExpenseService, category_pattern
from expense_api.utils.enums import ErrorKind


@pytest.fixture()
def collection():
    return mongomock.MongoClient().db.expenses


@pytest.fixture()
def service(collection):
    return ExpenseService(collection)


def _insert(collection, user, title, category="Food", amount=10, date=datetime(2024, 1, 1)):
    return collection.insert_one(
        {"user": user, "title": title, "amount": amount, "category": category, "date": date}
    ).inserted_id


def test_list_returns_only_owner_records_newest_first(service, collection):
    _insert(collection, "alice", "Old", date=datetime(2024, 1, 1))
    _insert(collection, "alice", "New", date=datetime(2024, 3, 1))
    _insert(collection, "bob", "Other")

    expenses, error = service.list_expenses("alice")
    assert error is None
    assert [e.title for e in expenses] == ["New", "Old"]


def test_create_assigns_id_and_owner(service, collection):
    expense, error = service.create_expense("alice", {"title": "Lunch", "amount": 12, "user": "bob"})
    assert error is None
    stored = collection.find_one({"_id": ObjectId(expense.id)})
    assert stored["user"] == "alice"
    assert stored["title"] == "Lunch"


def test_create_invalid_payload_touches_nothing(service, collection):
    expense, error = service.create_expense("alice", {"title": "Lunch"})
    assert expense is None
    assert error.kind is ErrorKind.VALIDATION
    assert collection.count_documents({}) == 0


def test_update_applies_zero_amount(service, collection):
    oid = _insert(collection, "alice", "Lunch", amount=12)
    expense, error = service.update_expense("alice", str(oid), {"amount": 0})
    assert error is None
    assert expense.amount == 0
    assert collection.find_one({"_id": oid})["amount"] == 0


def test_update_with_empty_patch_leaves_record(service, collection):
    oid = _insert(collection, "alice", "Lunch")
    before = collection.find_one({"_id": oid})
    expense, error = service.update_expense("alice", str(oid), {"unknown": 1})
    assert error is None
    assert expense.title == "Lunch"
    assert collection.find_one({"_id": oid}) == before


def test_update_by_other_user_is_not_authorized(service, collection):
    oid = _insert(collection, "alice", "Lunch")
    expense, error = service.update_expense("bob", str(oid), {"title": "Mine now"})
    assert expense is None
    assert error.kind is ErrorKind.NOT_AUTHORIZED
    assert collection.find_one({"_id": oid})["title"] == "Lunch"


@pytest.mark.parametrize("expense_id", [str(ObjectId()), "not-an-object-id"])
def test_update_missing_expense_is_not_found(service, expense_id):
    expense, error = service.update_expense("alice", expense_id, {"title": "x"})
    assert expense is None
    assert error.kind is ErrorKind.NOT_FOUND


def test_delete_checks_ownership_before_removing(service, collection):
    oid = _insert(collection, "alice", "Lunch")

    deleted, error = service.delete_expense("bob", str(oid))
    assert not deleted
    assert error.kind is ErrorKind.NOT_AUTHORIZED
    assert collection.count_documents({}) == 1

    deleted, error = service.delete_expense("alice", str(oid))
    assert deleted
    assert error is None
    assert collection.count_documents({}) == 0


def test_rename_is_case_insensitive_full_match(service, collection):
    food = _insert(collection, "alice", "Lunch", category="Food")
    foodie = _insert(collection, "alice", "Snack", category="Foodie")
    bobs = _insert(collection, "bob", "Dinner", category="food")

    renamed, error = service.rename_category("alice", "foo", "Meals")
    assert renamed is None
    assert error.kind is ErrorKind.NOT_FOUND

    renamed, error = service.rename_category("alice", "food", "  Meals ")
    assert error is None
    assert renamed == CategoryRename(old="food", new="Meals", matched=1)
    assert collection.find_one({"_id": food})["category"] == "Meals"
    assert collection.find_one({"_id": foodie})["category"] == "Foodie"
    assert collection.find_one({"_id": bobs})["category"] == "food"


def test_rename_ignores_category_with_trailing_newline(service, collection):
    padded = _insert(collection, "alice", "Lunch", category="Food\n")

    renamed, error = service.rename_category("alice", "food", "Meals")
    assert renamed is None
    assert error.kind is ErrorKind.NOT_FOUND
    assert collection.find_one({"_id": padded})["category"] == "Food\n"


def test_rename_treats_metacharacters_literally(service, collection):
    _insert(collection, "alice", "Gift", category="Gifts")
    literal = _insert(collection, "alice", "Misc", category="G.*")

    renamed, error = service.rename_category("alice", "g.*", "Other")
    assert error is None
    assert renamed.matched == 1
    assert collection.find_one({"_id": literal})["category"] == "Other"
    assert collection.count_documents({"category": "Gifts"}) == 1


@pytest.mark.parametrize("new_category", [None, "", "   ", 5])
def test_rename_requires_new_name(new_category):
    class ExplodingCollection:
        def __getattr__(self, name):
            raise AssertionError(f"store accessed: {name}")

    renamed, error = ExpenseService(ExplodingCollection()).rename_category("alice", "Food", new_category)
    assert renamed is None
    assert error.kind is ErrorKind.VALIDATION


def test_category_pattern_is_anchored():
    pattern = category_pattern("Food (work)")
    assert pattern.match("food (WORK)")
    assert not pattern.match("Food (work) extra")
    assert not pattern.match("Food work")
    assert not pattern.match("Food (work)\n")
