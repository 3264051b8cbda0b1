from flask import current_app
from pymongo import MongoClient

MONGO_EXTENSION = "mongo"


def init_mongo(app, client=None):
    """Attach a MongoDB client and database to ``app``.

    A ready client can be passed in (tests hand over a mongomock client);
    otherwise one is created from ``MONGO_URI``.
    """
    if client is None:
        client = MongoClient(app.config["MONGO_URI"])

    # get_default_database() reads the DB name from the URI path (e.g. /expenses)
    # and falls back to MONGO_DB_NAME when the URI has none
    db = client.get_default_database(default=app.config["MONGO_DB_NAME"])

    app.extensions[MONGO_EXTENSION] = {"client": client, "db": db}
    app.logger.info("[MongoDB] Connected to database: %s", db.name)
    return db


def get_db():
    """Get the database bound to the current app. Must be called after init_mongo."""
    state = current_app.extensions.get(MONGO_EXTENSION)
    if state is None:
        raise RuntimeError("Database not initialized. Call init_mongo first.")
    return state["db"]
