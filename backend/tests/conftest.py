from __future__ import annotations

import pathlib
import sys

import mongomock
import pytest
from flask_jwt_extended import create_access_token

BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from expense_api import create_app
from expense_api.config import TestConfig


@pytest.fixture()
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture()
def app(mongo_client):
    return create_app(TestConfig, mongo_client=mongo_client)


@pytest.fixture()
def db(app):
    return app.extensions["mongo"]["db"]


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_headers(app):
    """Build bearer headers for an arbitrary user identity."""
    def make(user_id: str) -> dict:
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}

    return make


@pytest.fixture()
def alice(auth_headers):
    return auth_headers("user-alice")


@pytest.fixture()
def bob(auth_headers):
    return auth_headers("user-bob")
