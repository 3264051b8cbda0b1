# expense_api/expenses/routes.py

from functools import wraps

from flask import Blueprint, Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from expense_api.expenses.services import ExpenseService
from expense_api.extensions import get_db
from expense_api.utils.enums import ErrorKind

expenses_bp = Blueprint("expenses", __name__)

ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_AUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
}


def _service():
    return ExpenseService(get_db().expenses)


def _payload():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error_response(error):
    return jsonify({"message": error.message}), ERROR_STATUS[error.kind]


def server_error_guard(view):
    """Answer any unclassified failure with a plain-text 500 and log it."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except Exception:
            current_app.logger.exception("%s %s failed", request.method, request.path)
            return Response("Server Error", status=500, mimetype="text/plain")
    return wrapper


@expenses_bp.route("/", methods=["GET"])
@jwt_required()
@server_error_guard
def get_expenses():
    """Get all expenses for the caller, most recent first."""
    user_id = get_jwt_identity()
    expenses, _ = _service().list_expenses(user_id)
    return jsonify([e.to_dict() for e in expenses])


@expenses_bp.route("/", methods=["POST"])
@jwt_required()
@server_error_guard
def add_expense():
    """
    Add a new expense owned by the caller.

    Request body:
    {
        "title": "Lunch",
        "amount": 12.5,
        "category": "Food",              // optional, default "General"
        "date": "2024-05-01T12:00:00Z"   // optional, default now
    }
    """
    user_id = get_jwt_identity()
    expense, error = _service().create_expense(user_id, _payload())
    if error:
        return _error_response(error)
    return jsonify(expense.to_dict())


@expenses_bp.route("/<expense_id>", methods=["GET"])
@jwt_required()
@server_error_guard
def get_expense(expense_id):
    user_id = get_jwt_identity()
    expense, error = _service().get_expense(user_id, expense_id)
    if error:
        return _error_response(error)
    return jsonify(expense.to_dict())


@expenses_bp.route("/<expense_id>", methods=["PUT"])
@jwt_required()
@server_error_guard
def update_expense(expense_id):
    """Partially update an expense. Only the fields present in the body change."""
    user_id = get_jwt_identity()
    expense, error = _service().update_expense(user_id, expense_id, _payload())
    if error:
        return _error_response(error)
    return jsonify(expense.to_dict())


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
@jwt_required()
@server_error_guard
def delete_expense(expense_id):
    user_id = get_jwt_identity()
    _, error = _service().delete_expense(user_id, expense_id)
    if error:
        return _error_response(error)

    current_app.logger.info("Expense %s removed by user %s", expense_id, user_id)
    return jsonify({"message": "Expense removed"})


@expenses_bp.route("/category/<path:old_category>", methods=["PUT"])
@jwt_required()
@server_error_guard
def update_category(old_category):
    """
    Rename a category across all of the caller's expenses.

    Request body:
    {
        "newCategory": "Meals"
    }
    """
    user_id = get_jwt_identity()
    new_category = _payload().get("newCategory")

    renamed, error = _service().rename_category(user_id, old_category, new_category)
    if error:
        return _error_response(error)

    current_app.logger.info(
        "User %s renamed category '%s' to '%s' on %d expenses",
        user_id, renamed.old, renamed.new, renamed.matched
    )
    return jsonify({
        "message": f"Category '{renamed.old}' was successfully updated to '{renamed.new}'."
    })
