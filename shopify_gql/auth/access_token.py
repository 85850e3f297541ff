"""
Admin API access token authentication.

Shopify authenticates Admin API calls with a private app access token sent in
the ``X-Shopify-Access-Token`` header.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, SecretStr

from ..exceptions import AuthenticationError
from .base import AuthConfig, AuthMethod, AuthResult, AuthType

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


class AccessTokenConfig(AuthConfig):
    """Configuration for access token authentication."""

    auth_type: AuthType = Field(default=AuthType.ACCESS_TOKEN, frozen=True)
    access_token: SecretStr = Field(description="Admin API access token")
    header_name: str = Field(
        default=ACCESS_TOKEN_HEADER, description="Header carrying the token"
    )

    model_config = ConfigDict(use_enum_values=True)


class AccessTokenAuth(AuthMethod):
    """
    Access token authentication method.

    Example:
        ```python
        auth = AccessTokenAuth(AccessTokenConfig(access_token="shpat_..."))
        result = await auth.get_auth_data()
        result.headers  # {"X-Shopify-Access-Token": "shpat_..."}
        ```
    """

    def __init__(self, config: AccessTokenConfig):
        super().__init__(config)
        self.config: AccessTokenConfig = config

    async def authenticate(self, **kwargs: Any) -> AuthResult:
        """
        Produce the access token header.

        Returns:
            AuthResult with the token header

        Raises:
            AuthenticationError: If the token is empty
        """
        token = self.config.access_token.get_secret_value()
        if not token or not token.strip():
            raise AuthenticationError("Access token is required but not provided")

        return AuthResult(success=True, headers={self.config.header_name: token})

    def validate_config(self) -> bool:
        """
        Validate the access token configuration.

        Returns:
            True if configuration is valid, False otherwise
        """
        if not self.config.access_token.get_secret_value().strip():
            return False

        if not self.config.header_name or not self.config.header_name.strip():
            return False

        return True
