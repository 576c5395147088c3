"""
Utilities package for minimapper.

Exports shared helpers for cross-cutting concerns such as logging.
Keep this package lightweight and free of mapping logic.
"""

from minimapper.utils.logging import (
    JsonFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)

__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "JsonFormatter",
]
