# backend/dialoom/core/ulid_helper.py
"""Primary key generation. Every table keys its rows by ULID strings."""

import ulid


def generate_ulid() -> str:
    """Return a new 26-character, time-sortable ULID string."""
    return str(ulid.ULID())
