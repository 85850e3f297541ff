"""
Tests for entity materialization.
"""

import json

import pytest

from shopify_gql.exceptions import InvalidIdentifier, InvalidScalar, ResponseShapeMismatch
from shopify_gql.graphql import (
    BulkOperation,
    BulkOperationStatus,
    EnvelopeDecoder,
    Id,
    Materializer,
    Money,
    NodeList,
    OperationTag,
    Product,
    ProductStatus,
    ProductVariant,
    WeightUnit,
    decode_response,
)


def materialize(tag: OperationTag, payload):
    body = json.dumps({"data": {tag.value: payload}})
    return Materializer().materialize(EnvelopeDecoder().decode(body, tag))


class TestProduct:
    """Test Product materialization."""

    def test_selected_fields_only(self):
        product = materialize(
            OperationTag.PRODUCT,
            {"id": "gid://shopify/Product/1", "title": "Tee", "vendor": "Acme"},
        )
        assert product == Product(id=Id.product("1"), title="Tee", vendor="Acme")
        assert product.status is None
        assert product.variants is None
        assert product.fetched_fields() == ("id", "title", "vendor")

    def test_nested_variants(self, product_payload):
        product = materialize(OperationTag.PRODUCT, product_payload)
        assert product.status is ProductStatus.ACTIVE
        assert product.tags == ("summer", "cotton")
        assert isinstance(product.variants, NodeList)
        assert len(product.variants) == 1

        variant = product.variants.get_node(0)
        assert variant.id == Id.product_variant("41358017773745")
        assert variant.price == Money(19.99)
        assert variant.weight_unit is WeightUnit.GRAMS
        assert variant.product is None

    def test_not_found(self):
        assert materialize(OperationTag.PRODUCT, None) is None

    def test_update_payload(self):
        product = materialize(
            OperationTag.PRODUCT_UPDATE,
            {"product": {"id": "gid://shopify/Product/1", "title": "MY TITLE"}},
        )
        assert product.title == "MY TITLE"


class TestProductVariant:
    """Test ProductVariant materialization."""

    def test_zero_is_distinct_from_unset(self):
        """Test that zero quantities and prices survive as values."""
        variant = materialize(
            OperationTag.PRODUCT_VARIANT,
            {
                "id": "gid://shopify/ProductVariant/2",
                "inventoryQuantity": 0,
                "price": "0.00",
                "weight": 0,
            },
        )
        assert variant.inventory_quantity == 0
        assert variant.price == Money(0.0)
        assert variant.weight == 0.0
        assert variant.compare_at_price is None
        assert variant.sku is None

    def test_null_compare_at_price(self):
        variant = materialize(
            OperationTag.PRODUCT_VARIANT,
            {"id": "gid://shopify/ProductVariant/2", "compareAtPrice": None},
        )
        assert variant.compare_at_price is None

    def test_nested_product(self):
        variant = materialize(
            OperationTag.PRODUCT_VARIANT,
            {
                "id": "gid://shopify/ProductVariant/2",
                "product": {"id": "gid://shopify/Product/1", "vendor": "Acme"},
            },
        )
        assert variant.product == Product(id=Id.product("1"), vendor="Acme")

    def test_update_payload(self):
        variant = materialize(
            OperationTag.PRODUCT_VARIANT_UPDATE,
            {"productVariant": {"id": "gid://shopify/ProductVariant/2", "sku": "SKU-9"}},
        )
        assert isinstance(variant, ProductVariant)
        assert variant.sku == "SKU-9"

    def test_malformed_money(self):
        with pytest.raises(InvalidScalar):
            materialize(
                OperationTag.PRODUCT_VARIANT,
                {"id": "gid://shopify/ProductVariant/2", "price": "twelve"},
            )

    def test_unknown_weight_unit(self):
        with pytest.raises(InvalidScalar):
            materialize(
                OperationTag.PRODUCT_VARIANT,
                {"id": "gid://shopify/ProductVariant/2", "weightUnit": "STONE"},
            )

    def test_malformed_id(self):
        with pytest.raises(InvalidIdentifier):
            materialize(OperationTag.PRODUCT_VARIANT, {"id": "gid://shopify/ProductVariant/x"})

    def test_id_of_another_type(self):
        """Test that a variant id is not accepted for a product."""
        with pytest.raises(ResponseShapeMismatch) as exc_info:
            materialize(OperationTag.PRODUCT, {"id": "gid://shopify/ProductVariant/1"})
        assert exc_info.value.expected == "Product"
        assert exc_info.value.actual == "ProductVariant"

    def test_nested_id_of_another_type(self):
        with pytest.raises(ResponseShapeMismatch):
            materialize(
                OperationTag.PRODUCT_VARIANT,
                {"id": "gid://shopify/ProductVariant/1", "product": {"id": "gid://shopify/Location/1"}},
            )


class TestConnections:
    """Test root connections."""

    def test_products_in_reply_order(self):
        products = materialize(
            OperationTag.PRODUCTS,
            {
                "edges": [
                    {"node": {"id": "gid://shopify/Product/3"}},
                    {"node": {"id": "gid://shopify/Product/1"}},
                ]
            },
        )
        assert [p.id.number for p in products] == ["3", "1"]
        assert products[1].id == Id.product("1")

    def test_empty(self):
        variants = materialize(OperationTag.PRODUCT_VARIANTS, {"edges": []})
        assert len(variants) == 0
        assert list(variants) == []


class TestBulkOperation:
    """Test bulk operation materialization."""

    def test_run_query(self):
        operation = materialize(
            OperationTag.BULK_OPERATION_RUN_QUERY,
            {"bulkOperation": {"id": "gid://shopify/BulkOperation/5", "status": "CREATED"}},
        )
        assert operation == BulkOperation(
            id=Id.bulk_operation("5"), status=BulkOperationStatus.CREATED
        )
        assert not operation.is_finished

    def test_current(self):
        operation = materialize(
            OperationTag.CURRENT_BULK_OPERATION,
            {
                "id": "gid://shopify/BulkOperation/5",
                "status": "COMPLETED",
                "objectCount": "42",
                "url": "https://storage.example.com/result.jsonl",
            },
        )
        assert operation.object_count == 42
        assert operation.is_finished

    def test_none_running(self):
        assert materialize(OperationTag.CURRENT_BULK_OPERATION, None) is None

    def test_bad_object_count(self):
        with pytest.raises(InvalidScalar):
            materialize(
                OperationTag.CURRENT_BULK_OPERATION,
                {"id": "gid://shopify/BulkOperation/5", "status": "RUNNING", "objectCount": "many"},
            )


class TestDecodeResponse:
    """Test the decode-and-materialize shortcut."""

    def test_decode_response(self):
        body = json.dumps({"data": {"product": {"id": "gid://shopify/Product/1"}}})
        assert decode_response(body, OperationTag.PRODUCT) == Product(id=Id.product("1"))
