from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a hex id, returning None for anything that is not an ObjectId."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def canonical_id(value: str) -> str:
    """Lowercase hex for ObjectId-shaped ids; anything else is returned as given."""
    oid = to_object_id(value)
    return str(oid) if oid is not None else value
