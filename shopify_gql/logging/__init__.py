"""
Logging system for shopify_gql.

This module provides console logging with colored or structured JSON output
and credential masking.
"""

from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter
from .manager import LoggingManager, cleanup_logging, get_logger, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "get_logger",
    "cleanup_logging",
    "StructuredFormatter",
    "ColoredFormatter",
    "SensitiveDataFilter",
]
