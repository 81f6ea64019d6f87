"""
Shared utility functions.

This package contains utility code used across the fetch, output and
runner stages.
"""

from .logging import (
    JsonlFormatter,
    close_logging,
    log_event,
    setup_logging,
    truncate_text,
)

__all__ = [
    "setup_logging",
    "close_logging",
    "log_event",
    "truncate_text",
    "JsonlFormatter",
]
