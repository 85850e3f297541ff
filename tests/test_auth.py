"""
Tests for access token authentication.
"""

import pytest

from shopify_gql.auth import (
    ACCESS_TOKEN_HEADER,
    AccessTokenAuth,
    AccessTokenConfig,
    AuthResult,
    AuthType,
)
from shopify_gql.exceptions import AuthenticationError


class TestAccessTokenAuth:
    """Test the access token header producer."""

    def test_config_defaults(self):
        config = AccessTokenConfig(access_token="shpat_abc")
        assert config.auth_type == AuthType.ACCESS_TOKEN.value
        assert config.header_name == ACCESS_TOKEN_HEADER
        assert "shpat_abc" not in repr(config)

    @pytest.mark.asyncio
    async def test_authenticate(self):
        auth = AccessTokenAuth(AccessTokenConfig(access_token="shpat_abc"))

        result = await auth.authenticate()

        assert result == AuthResult(success=True, headers={"X-Shopify-Access-Token": "shpat_abc"})

    @pytest.mark.asyncio
    async def test_custom_header(self):
        auth = AccessTokenAuth(
            AccessTokenConfig(access_token="tok", header_name="X-Test-Token")
        )
        result = await auth.get_auth_data()
        assert result.headers == {"X-Test-Token": "tok"}

    @pytest.mark.asyncio
    async def test_result_cached(self):
        auth = AccessTokenAuth(AccessTokenConfig(access_token="shpat_abc"))

        first = await auth.get_auth_data()
        second = await auth.get_auth_data()

        assert first is second
        assert auth.is_authenticated
        auth.clear_cache()
        assert not auth.is_authenticated

    @pytest.mark.asyncio
    async def test_disabled(self):
        auth = AccessTokenAuth(AccessTokenConfig(access_token="shpat_abc", enabled=False))
        result = await auth.get_auth_data()
        assert result.success
        assert result.headers == {}

    @pytest.mark.asyncio
    async def test_blank_token(self):
        auth = AccessTokenAuth(AccessTokenConfig(access_token="  "))
        assert not auth.validate_config()
        with pytest.raises(AuthenticationError):
            await auth.get_auth_data()

    def test_validate_config(self):
        assert AccessTokenAuth(AccessTokenConfig(access_token="shpat_abc")).validate_config()
