import secrets
import uuid
from datetime import datetime, timezone
from typing import Optional

from .config import settings


# =========================
# Time Handling
# =========================
def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to already be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# =========================
# Identifiers & Keys
# =========================
def generate_id() -> str:
    """Generate a unique row id"""
    return str(uuid.uuid4())


def verify_service_key(token: Optional[str]) -> bool:
    """Check a bearer token against the configured service role key.

    When no key is configured every caller is accepted.
    """
    if not settings.SERVICE_ROLE_KEY:
        return True
    if not token:
        return False
    return secrets.compare_digest(token, settings.SERVICE_ROLE_KEY)
