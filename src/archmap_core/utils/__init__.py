"""
Utilities for archmap core.

License: MIT
"""

from .logger_factory import configure_logging, ensure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    "ensure_logging",
]
