# app/utils/ids.py
import re
import uuid
from datetime import datetime, timezone

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_id() -> str:
    """Opaque store id (uuid4 hex)."""
    return uuid.uuid4().hex


def is_valid_id(value) -> bool:
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
