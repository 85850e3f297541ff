"""
Tests for the Shopify client pipeline.
"""

import json

import pytest

from shopify_gql.exceptions import (
    ConfigurationError,
    CycleRejected,
    RemoteError,
    ResponseShapeMismatch,
    TransportDecodeError,
    TransportError,
)
from shopify_gql.graphql import (
    BulkOperationBuilder,
    BulkOperationStatus,
    CompositeField,
    Connection,
    EntityKind,
    ErrorEnvelope,
    FieldSelectionSet,
    Id,
    Money,
    NodeList,
    OperationKind,
    OperationTag,
    Product,
    ProductQueryBuilder,
    ProductVariantQueryBuilder,
    ShopifyClient,
    SuccessEnvelope,
    VariantSelection,
)

from conftest import API_URL


class TestClientConstruction:
    """Test creating clients."""

    def test_requires_config_or_transport(self):
        with pytest.raises(ConfigurationError):
            ShopifyClient()

    def test_transport_only(self, make_transport):
        transport = make_transport()
        client = ShopifyClient(transport=transport)
        assert client.transport is transport
        assert client.config is None

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("SHOPIFY_API_URL", API_URL)
        monkeypatch.setenv("SHOPIFY_API_TOKEN", "shpat_env")

        client = ShopifyClient.from_env()

        assert client.config.endpoint == API_URL
        assert client.config.api_token.get_secret_value() == "shpat_env"

    def test_from_env_missing(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        for name in ("SHOPIFY_API_URL", "SHOPIFY_API_TOKEN", "API_URL", "API_TOKEN"):
            monkeypatch.delenv(name, raising=False)

        with pytest.raises(ConfigurationError):
            ShopifyClient.from_env()

    @pytest.mark.asyncio
    async def test_supplied_transport_not_closed(self, mock_transport):
        async with ShopifyClient(transport=mock_transport):
            pass
        mock_transport.close.assert_not_called()


class TestExecute:
    """Test compile, send, decode and materialize."""

    @pytest.mark.asyncio
    async def test_read_product(self, product_id, make_transport, make_reply):
        transport = make_transport(
            make_reply({"product": {"id": product_id.gid, "title": "Tee", "vendor": "Acme"}})
        )
        builder = ProductQueryBuilder.for_read(product_id).with_title().with_vendor()

        async with ShopifyClient(transport=transport) as client:
            product = await client.execute(builder)

        assert product == Product(id=product_id, title="Tee", vendor="Acme")
        assert transport.sent == [builder.compile()]

    @pytest.mark.asyncio
    async def test_builder_execute(self, variant_id, make_transport, make_reply):
        transport = make_transport(
            make_reply({"productVariantUpdate": {"productVariant": {"id": variant_id.gid, "price": "5.00"}}})
        )
        client = ShopifyClient(transport=transport)

        variant = await (
            ProductVariantQueryBuilder.for_update(variant_id)
            .update_price(5)
            .with_price()
            .execute(client)
        )

        assert variant.price == Money(5.0)
        assert transport.sent[0].startswith("mutation { productVariantUpdate(input: {")

    @pytest.mark.asyncio
    async def test_not_found(self, product_id, make_transport, make_reply):
        client = ShopifyClient(transport=make_transport(make_reply({"product": None})))
        assert await client.execute(ProductQueryBuilder.for_read(product_id)) is None

    @pytest.mark.asyncio
    async def test_connection(self, make_transport, make_reply, product_payload):
        client = ShopifyClient(
            transport=make_transport(make_reply({"products": {"edges": [{"node": product_payload}]}}))
        )
        builder = ProductQueryBuilder.for_connection(first=1).with_variants(
            VariantSelection.first(1).with_price()
        )

        products = await client.execute(builder)

        assert isinstance(products, NodeList)
        assert products[0].variants[0].price == Money(19.99)

    @pytest.mark.asyncio
    async def test_bulk_run(self, make_transport, make_reply):
        transport = make_transport(
            make_reply(
                {"bulkOperationRunQuery": {"bulkOperation": {"id": "gid://shopify/BulkOperation/9", "status": "CREATED"}}}
            )
        )
        client = ShopifyClient(transport=transport)

        operation = await client.execute(
            BulkOperationBuilder.run_query(ProductQueryBuilder.for_connection(first=5))
        )

        assert operation.id == Id.bulk_operation("9")
        assert operation.status is BulkOperationStatus.CREATED
        assert '"""{ products { edges { node { id } } } }"""' in transport.sent[0]

    @pytest.mark.asyncio
    async def test_mismatched_reply(self, product_id, make_transport, make_reply):
        """Test that a reply for another operation is rejected."""
        client = ShopifyClient(
            transport=make_transport(make_reply({"productVariant": {"id": "gid://shopify/ProductVariant/1"}}))
        )
        with pytest.raises(ResponseShapeMismatch):
            await client.execute(ProductQueryBuilder.for_read(product_id))

    @pytest.mark.asyncio
    async def test_remote_error(self, product_id, mock_transport):
        mock_transport.send.return_value = json.dumps(
            {"errors": [{"message": "Throttled"}]}
        ).encode("utf-8")
        client = ShopifyClient(transport=mock_transport)

        with pytest.raises(RemoteError) as exc_info:
            await client.execute(ProductQueryBuilder.for_read(product_id))

        assert exc_info.value.messages == ["Throttled"]
        mock_transport.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, product_id, mock_transport):
        mock_transport.send.side_effect = TransportError("Connection error: refused")
        client = ShopifyClient(transport=mock_transport)

        with pytest.raises(TransportError):
            await client.execute(ProductQueryBuilder.for_read(product_id))

    @pytest.mark.asyncio
    async def test_cycle_rejected_before_send(self, product_id, mock_transport):
        product = CompositeField("product", EntityKind.PRODUCT, FieldSelectionSet.of("id"))
        variants = CompositeField(
            "variants",
            EntityKind.PRODUCT_VARIANT,
            FieldSelectionSet.of("id").add(product),
            Connection.first(1),
        )
        builder = ProductQueryBuilder(
            fields=FieldSelectionSet.of("id").add(variants),
            operation_kind=OperationKind.READ,
            identifier=product_id,
        )
        client = ShopifyClient(transport=mock_transport)

        with pytest.raises(CycleRejected):
            await client.execute(builder)

        mock_transport.send.assert_not_awaited()


class TestRunQuery:
    """Test sending prebuilt documents."""

    @pytest.mark.asyncio
    async def test_success_envelope(self, make_transport, make_reply):
        transport = make_transport(make_reply({"currentBulkOperation": None}))
        client = ShopifyClient(transport=transport)

        envelope = await client.run_query("query { currentBulkOperation { id,status } }")

        assert isinstance(envelope, SuccessEnvelope)
        assert envelope.operation is OperationTag.CURRENT_BULK_OPERATION
        assert transport.sent == ["query { currentBulkOperation { id,status } }"]

    @pytest.mark.asyncio
    async def test_error_envelope_not_raised(self, mock_transport):
        mock_transport.send.return_value = b'{"errors": [{"message": "Bad"}]}'
        client = ShopifyClient(transport=mock_transport)

        envelope = await client.run_query(BulkOperationBuilder.current().build())

        assert isinstance(envelope, ErrorEnvelope)

    @pytest.mark.asyncio
    async def test_undecodable(self, mock_transport):
        mock_transport.send.return_value = b"<html></html>"
        client = ShopifyClient(transport=mock_transport)

        with pytest.raises(TransportDecodeError):
            await client.run_query("query { x }")


class TestEndToEnd:
    """Test the full pipeline over the aiohttp transport."""

    @pytest.mark.asyncio
    async def test_read_then_update(self, aiohttp_client, mock_aiohttp, product_id):
        mock_aiohttp.post(
            API_URL,
            status=200,
            payload={"data": {"product": {"id": product_id.gid, "title": "Old", "vendor": "Acme"}}},
        )
        mock_aiohttp.post(
            API_URL,
            status=200,
            payload={"data": {"productUpdate": {"product": {"id": product_id.gid, "title": "MY TITLE"}}}},
        )

        product = await aiohttp_client.execute(
            ProductQueryBuilder.for_read(product_id).with_title().with_vendor()
        )
        updated = await aiohttp_client.execute(
            ProductQueryBuilder.for_update(product_id).update_title("MY TITLE").with_title()
        )

        assert product.title == "Old"
        assert product.vendor == "Acme"
        assert updated.title == "MY TITLE"
        assert updated.vendor is None

    @pytest.mark.asyncio
    async def test_unauthorized(self, aiohttp_client, mock_aiohttp, product_id):
        mock_aiohttp.post(
            API_URL, status=401, payload={"errors": "[API] Invalid API key or access token"}
        )

        with pytest.raises(RemoteError):
            await aiohttp_client.execute(ProductQueryBuilder.for_read(product_id))
