"""
Configuration models for shopify_gql.

This module defines all configuration data models with validation and defaults.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, SecretStr, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )
    mask_credentials: bool = Field(default=True, description="Mask credentials in logs")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class ShopifyConfig(BaseModel):
    """
    Connection settings for one shop's Admin GraphQL endpoint.

    Examples:
        ```python
        config = ShopifyConfig(
            api_url="https://my-shop.myshopify.com/admin/api/2024-01/graphql.json",
            api_token="shpat_...",
        )
        ```
    """

    api_url: HttpUrl = Field(description="Admin GraphQL endpoint")
    api_token: SecretStr = Field(description="Admin API access token")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    user_agent: str = Field(
        default="shopify-gql/0.1.0", description="User-Agent header"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    @field_validator("api_token")
    @classmethod
    def validate_token(cls, v: SecretStr) -> SecretStr:
        """Reject blank tokens."""
        if not v.get_secret_value().strip():
            raise ValueError("api_token must not be empty")
        return v

    @property
    def endpoint(self) -> str:
        return str(self.api_url)

    def masked(self) -> dict:
        """Dump the settings with the token hidden, for logging."""
        data = self.model_dump(mode="json")
        data["api_token"] = "***"
        return data

