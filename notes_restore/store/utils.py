"""Shared ID generator for stored records."""

from __future__ import annotations

import uuid


def generate_id() -> str:
    """Return a new random UUID string (v4).

    Used for archived records that carry no ``id`` of their own.
    """
    return str(uuid.uuid4())
