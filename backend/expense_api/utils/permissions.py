"""Permission helpers."""

def is_owner(user_id, doc):
    """True when the stored document belongs to ``user_id``."""
    owner = (doc or {}).get("user")
    return owner is not None and str(owner) == str(user_id)
