"""
Base authentication classes and interfaces.

This module defines the base classes and interfaces for the authentication
methods used by the shopify_gql transport.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthType(str, Enum):
    """Supported authentication types."""

    ACCESS_TOKEN = "access_token"


@dataclass
class AuthResult:
    """Result of authentication operation."""

    success: bool
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None


class AuthConfig(BaseModel):
    """Base configuration for authentication methods."""

    auth_type: AuthType
    enabled: bool = Field(default=True, description="Whether authentication is enabled")
    cache_credentials: bool = Field(
        default=True, description="Cache credentials for reuse"
    )

    model_config = ConfigDict(use_enum_values=True)


class AuthMethod(ABC):
    """
    Abstract base class for all authentication methods.

    Subclasses produce the request headers; this class caches a successful
    result so the headers are built once per method instance.
    """

    def __init__(self, config: AuthConfig):
        """
        Initialize the authentication method.

        Args:
            config: Authentication configuration
        """
        self.config = config
        self._cached_result: Optional[AuthResult] = None

    @abstractmethod
    async def authenticate(self, **kwargs: Any) -> AuthResult:
        """
        Perform authentication and return credentials.

        Returns:
            AuthResult containing authentication headers

        Raises:
            AuthenticationError: If authentication fails
        """
        pass

    async def get_auth_data(self, force_refresh: bool = False, **kwargs: Any) -> AuthResult:
        """
        Get authentication data, using cache if available.

        Args:
            force_refresh: Rebuild even if a cached result exists
            **kwargs: Additional parameters for authentication

        Returns:
            AuthResult containing authentication data
        """
        if not self.config.enabled:
            return AuthResult(success=True)

        if (
            not force_refresh
            and self.config.cache_credentials
            and self._cached_result
            and self._cached_result.success
        ):
            return self._cached_result

        result = await self.authenticate(**kwargs)
        if result.success and self.config.cache_credentials:
            self._cached_result = result

        return result

    def clear_cache(self) -> None:
        """Clear cached authentication data."""
        self._cached_result = None

    @property
    def is_authenticated(self) -> bool:
        """Check if a successful result is cached."""
        return self._cached_result is not None and self._cached_result.success
