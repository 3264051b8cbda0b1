from datetime import datetime, timezone

from bcrypt import checkpw, gensalt, hashpw
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

from expense_api.extensions import get_db
from expense_api.utils.validators import missing_keys, parse_object_id

auth_bp = Blueprint("auth", __name__)


def _public_user(user):
    return {
        "_id": str(user["_id"]),
        "name": user["name"],
        "email": user["email"]
    }


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}
    db = get_db()

    missing = missing_keys(data, "name", "email", "password")
    if missing:
        return jsonify({"message": f"Missing required fields: {', '.join(missing)}"}), 400

    email = str(data["email"]).strip().lower()
    if db.users.find_one({"email": email}):
        return jsonify({"message": "User already exists"}), 409

    user = {
        "name": str(data["name"]).strip(),
        "email": email,
        "password_hash": hashpw(str(data["password"]).encode(), gensalt()),
        "created_at": datetime.now(timezone.utc).replace(tzinfo=None)
    }

    res = db.users.insert_one(user)
    user["_id"] = res.inserted_id
    access_token = create_access_token(identity=str(res.inserted_id))
    current_app.logger.info("Registered user %s", res.inserted_id)

    return jsonify({
        "access_token": access_token,
        "user": _public_user(user)
    }), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email = str(data.get("email") or "").strip().lower()
    password = str(data.get("password") or "")

    user = get_db().users.find_one({"email": email})
    if not user or not checkpw(password.encode(), user["password_hash"]):
        return jsonify({"message": "Invalid credentials"}), 401

    token = create_access_token(identity=str(user["_id"]))

    return jsonify({
        "access_token": token,
        "user": _public_user(user)
    })


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    uid = parse_object_id(get_jwt_identity())
    user = get_db().users.find_one({"_id": uid}) if uid else None

    if not user:
        return jsonify({"message": "User not found"}), 404

    return jsonify(_public_user(user))
