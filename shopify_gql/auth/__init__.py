"""
Authentication module for shopify_gql.

This module produces the request headers that authenticate Admin API calls.
"""

from .access_token import ACCESS_TOKEN_HEADER, AccessTokenAuth, AccessTokenConfig
from .base import AuthConfig, AuthMethod, AuthResult, AuthType

__all__ = [
    "ACCESS_TOKEN_HEADER",
    "AccessTokenAuth",
    "AccessTokenConfig",
    "AuthConfig",
    "AuthMethod",
    "AuthResult",
    "AuthType",
]
