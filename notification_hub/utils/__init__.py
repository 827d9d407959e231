"""Utility helpers for reusable functionality."""

from .clock import (
    ensure_app_timezone,
    get_app_timezone,
    isoformat_or_none,
    now_in_app_timezone,
    parse_utc_offset,
)

__all__ = [
    "ensure_app_timezone",
    "get_app_timezone",
    "isoformat_or_none",
    "now_in_app_timezone",
    "parse_utc_offset",
]
