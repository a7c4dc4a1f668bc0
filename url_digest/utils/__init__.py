"""
Shared utility functions.

This package contains utility code used across multiple
pipeline stages.
"""

from .deadline import Deadline, bound_timeout
from .logging import (
    JsonlFormatter,
    log_event,
    redact_text,
    setup_logging,
    setup_provider_logger,
    truncate_text,
)

__all__ = [
    "Deadline",
    "bound_timeout",
    "setup_logging",
    "setup_provider_logger",
    "log_event",
    "redact_text",
    "truncate_text",
    "JsonlFormatter",
]
