"""Request validators."""
from bson import ObjectId
from bson.errors import InvalidId


def missing_keys(payload, *keys):
    """Return the keys from ``keys`` that are absent or blank in ``payload``."""
    payload = payload or {}
    missing = []
    for k in keys:
        value = payload.get(k)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(k)
    return missing


def parse_object_id(value):
    """Convert ``value`` to an ObjectId, or None when it is not a valid id."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
