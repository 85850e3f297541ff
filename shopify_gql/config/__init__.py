"""
Configuration management for shopify_gql.

This module loads the client's connection and logging settings from
configuration files and environment variables.
"""

from .loader import ConfigLoader
from .models import LoggingConfig, LogLevel, ShopifyConfig

__all__ = [
    "ConfigLoader",
    "LoggingConfig",
    "LogLevel",
    "ShopifyConfig",
]
