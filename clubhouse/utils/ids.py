import uuid


def new_id(prefix: str) -> str:
    """Short prefixed document id, e.g. `post_3f9a0c1d2e4b`."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"
