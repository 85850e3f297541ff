"""
Transport layer.

A transport posts a compiled document to the Admin GraphQL endpoint and
hands back the raw reply body. It never interprets the body: classifying the
reply is the envelope decoder's job, so non-2xx replies are returned as-is.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, runtime_checkable

import aiohttp

from ..auth import AccessTokenAuth, AccessTokenConfig
from ..config import ShopifyConfig
from ..exceptions import ErrorHandler

logger = logging.getLogger(__name__)

GRAPHQL_CONTENT_TYPE = "application/graphql"


@runtime_checkable
class Transport(Protocol):
    """Sends one document and returns the reply body."""

    async def send(self, document: str) -> bytes: ...


class AiohttpTransport:
    """
    aiohttp-backed transport.

    Examples:
        ```python
        async with AiohttpTransport(config) as transport:
            body = await transport.send('query { currentBulkOperation { id } }')
        ```
    """

    def __init__(
        self,
        config: ShopifyConfig,
        auth: Optional[AccessTokenAuth] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the transport.

        Args:
            config: Endpoint, token and timeout settings
            auth: Header producer; built from ``config.api_token`` if omitted
            session: Externally owned session; not closed by this transport
        """
        self.config = config
        self.auth = auth or AccessTokenAuth(AccessTokenConfig(access_token=config.api_token))
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> AiohttpTransport:
        await self._create_session()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _create_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,  # Status codes are classified by the decoder
            )
            self._owns_session = True
            logger.debug("HTTP session created")
        return self._session

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def send(self, document: str) -> bytes:
        """
        Post a document and read the reply body.

        Args:
            document: Compiled GraphQL document

        Returns:
            Raw reply body, whatever the HTTP status

        Raises:
            TransportError: On connection failures
            TransportTimeoutError: If the request exceeds the configured timeout
            AuthenticationError: If no access token header can be produced
        """
        session = await self._create_session()

        auth_result = await self.auth.get_auth_data()
        headers = {"Content-Type": GRAPHQL_CONTENT_TYPE}
        headers.update(auth_result.headers)

        url = self.config.endpoint
        try:
            async with session.post(
                url, data=document.encode("utf-8"), headers=headers
            ) as response:
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ErrorHandler.handle_aiohttp_error(e, url, self.config.timeout) from e

        logger.debug("POST %s -> %d (%d bytes)", url, response.status, len(body))
        if response.status >= 400:
            logger.warning("Shopify replied with HTTP %d", response.status)
        return body

