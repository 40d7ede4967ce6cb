"""Shared model utilities used across all models."""

import uuid
from datetime import UTC, date, datetime


def generate_uuid() -> str:
    """Generate a new UUID4 as its 36-character string form."""
    return str(uuid.uuid4())


def today() -> date:
    """Current UTC calendar date, used as the invoice date on creation."""
    return datetime.now(UTC).date()
