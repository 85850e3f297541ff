"""
Custom logging filters for shopify_gql.

This module provides the filter that masks credentials in log messages.
"""

import logging
import re
from typing import List, Pattern


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        # Patterns for sensitive data
        self.patterns: List[Pattern[str]] = [
            # Access token header, in dict reprs and raw header dumps
            re.compile(
                r"""(x-shopify-access-token['"]?\s*[:=]\s*['"]?)([^'"\s,}]+)""",
                re.IGNORECASE,
            ),
            # Admin API tokens wherever they appear
            re.compile(r"\b(shp(?:at|ca|pa|ss)_)([A-Za-z0-9]+)"),
            # API keys and tokens
            re.compile(
                r'(api[_-]?key|api[_-]?token|token|secret)["\s]*[:=]["\s]*([a-zA-Z0-9+/=_]{20,})',
                re.IGNORECASE,
            ),
            re.compile(r"(bearer\s+)([a-zA-Z0-9+/=]{20,})", re.IGNORECASE),
            # URLs with credentials
            re.compile(r"(https?://[^:/\s]+):([^@\s]+)@", re.IGNORECASE),
        ]

        # Replacement patterns
        self.replacements = [
            r"\1***MASKED***",  # Access token header
            r"\1***MASKED***",  # Admin API tokens
            r"\1: ***MASKED***",  # API keys and tokens
            r"\1***MASKED***",  # Bearer tokens
            r"\1:***MASKED***@",  # URL credentials
        ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        try:
            # Get the formatted message
            message = record.getMessage()
        except (TypeError, ValueError):
            # Malformed format args; let the handler report it
            return True

        # Apply all masking patterns
        for pattern, replacement in zip(self.patterns, self.replacements):
            message = pattern.sub(replacement, message)

        # Update the record
        record.msg = message
        record.args = ()

        return True
