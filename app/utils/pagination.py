"""Limit/offset normalization shared by every list operation."""

from __future__ import annotations

DEFAULT_LIMIT = 20
DEFAULT_MESSAGE_LIMIT = 50
MAX_LIMIT = 100


def normalize_limit(limit: int | None, default: int = DEFAULT_LIMIT) -> int:
    """Return limit if it lies in (0, MAX_LIMIT], otherwise the default."""
    if limit is None or limit <= 0 or limit > MAX_LIMIT:
        return default
    return limit


def normalize_offset(offset: int | None) -> int:
    if offset is None or offset < 0:
        return 0
    return offset
