"""
Shopify Admin GraphQL client.

This module ties the pipeline together: a builder is compiled to a document,
sent once through a transport, decoded against the reply shape the builder
expects, and materialized into an entity.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

from ..config import ConfigLoader, ShopifyConfig
from ..exceptions import ConfigurationError
from .compiler import CompilableBuilder, DocumentCompiler
from .envelope import EnvelopeDecoder, ResponseEnvelope
from .materializer import Materializer
from .models import GraphQLDocument
from .transport import AiohttpTransport, Transport

logger = logging.getLogger(__name__)


class ShopifyClient:
    """
    Client for the Shopify Admin GraphQL API.

    Every call sends exactly one request; nothing is retried or cached.
    Errors from any stage propagate unchanged to the caller.

    Examples:
        Read a product:
        ```python
        config = ShopifyConfig(api_url=API_URL, api_token=API_TOKEN)

        async with ShopifyClient(config) as client:
            product = await client.execute(
                ProductQueryBuilder.for_read(Id.product("7343141159089"))
                .with_title()
                .with_vendor()
            )
            print(product.title)
        ```

        Update a variant:
        ```python
        variant = await (
            ProductVariantQueryBuilder.for_update(Id.product_variant("4137"))
            .update_price("19.99")
            .with_price()
            .execute(client)
        )
        ```

        From environment variables:
        ```python
        async with ShopifyClient.from_env() as client:
            envelope = await client.run_query("query { currentBulkOperation { id } }")
        ```
    """

    def __init__(
        self,
        config: Optional[ShopifyConfig] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Connection settings; required unless a transport is given
            transport: Transport to send through; an AiohttpTransport is
                created from ``config`` if omitted

        Raises:
            ConfigurationError: If neither a config nor a transport is given
        """
        if config is None and transport is None:
            raise ConfigurationError("A ShopifyConfig or a transport is required")

        self.config = config
        self._owns_transport = transport is None
        self.transport: Transport = transport or AiohttpTransport(config)  # type: ignore[arg-type]
        self._compiler = DocumentCompiler()
        self._decoder = EnvelopeDecoder()
        self._materializer = Materializer()

    @classmethod
    def from_env(cls, config_file: Optional[Union[str, Path]] = None) -> ShopifyClient:
        """
        Create a client from a config file and environment variables.

        Raises:
            ConfigurationError: If the settings are missing or invalid
        """
        return cls(ConfigLoader().load_config(config_file))

    async def __aenter__(self) -> ShopifyClient:
        """Async context manager entry."""
        if self._owns_transport and isinstance(self.transport, AiohttpTransport):
            await self.transport.__aenter__()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self.transport, AiohttpTransport):
            await self.transport.close()

    async def execute(self, builder: CompilableBuilder) -> Any:
        """
        Compile, send and decode one builder.

        Args:
            builder: Product, variant or bulk-operation builder

        Returns:
            The materialized entity; a NodeList for connections; None when a
            read by id finds nothing

        Raises:
            CycleRejected: If the selection selects back into its own kind
            TransportError: If the request fails on the network
            RemoteError: If the API answers with errors
            ResponseShapeMismatch: If the reply answers a different operation
            TransportDecodeError: If the reply matches no known shape
            InvalidScalar: If a returned scalar is malformed
        """
        document = self._compiler.build(builder)
        logger.debug("Executing %s: %s", document.operation.value, document.text)

        body = await self.transport.send(document.text)
        envelope = self._decoder.decode(body, document.operation)
        return self._materializer.materialize(envelope)

    async def run_query(self, document: Union[str, GraphQLDocument]) -> ResponseEnvelope:
        """
        Send a prebuilt document and return the parsed envelope.

        No cross-check is made against an expected operation; the caller
        inspects the envelope.

        Args:
            document: Document text or compiled document

        Returns:
            SuccessEnvelope or ErrorEnvelope

        Raises:
            TransportError: If the request fails on the network
            TransportDecodeError: If the reply matches no known shape
        """
        text = document.text if isinstance(document, GraphQLDocument) else document
        logger.debug("Running query: %s", text)

        body = await self.transport.send(text)
        return self._decoder.parse(body)
