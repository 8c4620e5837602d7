# app/core/auth.py
from typing import Optional
from fastapi import Header
from app.config import settings


async def get_current_identity(
    x_staff_identity: Optional[str] = Header(None),
) -> str:
    """Identity recorded on writes (updatedBy, addedBy).

    No authentication is enforced: the header is trusted as-is and falls back
    to PLACEHOLDER_IDENTITY.
    """
    if x_staff_identity and x_staff_identity.strip():
        return x_staff_identity.strip()
    return settings.PLACEHOLDER_IDENTITY
