"""Utility helpers for reusable functionality."""

from .datetime import (
    combine_in_app_timezone,
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_timezone,
    reset_app_timezone_cache,
    resolve_timezone,
)

__all__ = [
    "combine_in_app_timezone",
    "ensure_app_timezone",
    "get_app_timezone",
    "now_in_app_timezone",
    "reset_app_timezone_cache",
    "resolve_timezone",
]
