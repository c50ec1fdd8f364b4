"""Utility helpers for reusable functionality."""

from .datetime import (
    as_utc,
    get_app_timezone,
    isoformat_or_none,
    now_in_app_timezone,
    to_storage,
    utc_now,
    utc_now_naive,
)

__all__ = [
    "as_utc",
    "get_app_timezone",
    "isoformat_or_none",
    "now_in_app_timezone",
    "to_storage",
    "utc_now",
    "utc_now_naive",
]
