"""Opaque string identifiers for primary keys."""

import uuid


def new_id() -> str:
    """Return a fresh, unique, URL-safe identifier (32 hex chars)."""
    return uuid.uuid4().hex
