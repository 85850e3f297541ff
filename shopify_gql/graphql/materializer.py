"""
Entity materializer.

Converts a decoded success envelope into the caller-facing entity. Nested
entities are built from their own embedded payload, so the depth of the
result is exactly the depth of the selection that was compiled.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

from ..exceptions import InvalidScalar, ResponseShapeMismatch
from .entities import BulkOperation, NodeList, Product, ProductVariant
from .envelope import (
    BulkOperationNode,
    BulkOperationRunPayload,
    ProductConnectionPayload,
    ProductNode,
    ProductUpdatePayload,
    SuccessEnvelope,
    VariantConnectionPayload,
    VariantNode,
    VariantUpdatePayload,
)
from .identifiers import EntityType, Id
from .models import OperationTag
from .scalars import BulkOperationStatus, Money, ProductStatus, WeightUnit

logger = logging.getLogger(__name__)


class Materializer:
    """
    Builds entities from decoded payloads.

    Examples:
        ```python
        envelope = EnvelopeDecoder().decode(raw, OperationTag.PRODUCT)
        product = Materializer().materialize(envelope)
        ```
    """

    def __init__(self) -> None:
        self._handlers: Dict[OperationTag, Callable[[Any], Any]] = {
            OperationTag.PRODUCT: self.product,
            OperationTag.PRODUCT_UPDATE: self._product_update,
            OperationTag.PRODUCT_VARIANT: self.product_variant,
            OperationTag.PRODUCT_VARIANT_UPDATE: self._variant_update,
            OperationTag.PRODUCTS: self.products,
            OperationTag.PRODUCT_VARIANTS: self.product_variants,
            OperationTag.BULK_OPERATION_RUN_QUERY: self._bulk_operation_run,
            OperationTag.CURRENT_BULK_OPERATION: self.bulk_operation,
        }

    def materialize(
        self, envelope: SuccessEnvelope
    ) -> Union[Product, ProductVariant, NodeList[Any], BulkOperation, None]:
        """
        Materialize the entity carried by a success envelope.

        Args:
            envelope: Decoded reply

        Returns:
            Product, ProductVariant, NodeList or BulkOperation; None when a
            single-entity read found nothing

        Raises:
            InvalidScalar: If a scalar in the payload is malformed
            InvalidIdentifier: If an id in the payload is malformed
            ResponseShapeMismatch: If an id names another entity type
        """
        logger.debug("Materializing %s payload", envelope.operation.value)
        return self._handlers[envelope.operation](envelope.payload)

    def product(self, node: Optional[ProductNode]) -> Optional[Product]:
        if node is None:
            return None
        return Product(
            id=_entity_id(node.id, EntityType.PRODUCT),
            title=node.title,
            status=ProductStatus.from_wire(node.status) if node.status is not None else None,
            vendor=node.vendor,
            handle=node.handle,
            product_type=node.product_type,
            tags=tuple(node.tags) if node.tags is not None else None,
            variants=(
                self.product_variants(node.variants) if node.variants is not None else None
            ),
        )

    def product_variant(self, node: Optional[VariantNode]) -> Optional[ProductVariant]:
        if node is None:
            return None
        return ProductVariant(
            id=_entity_id(node.id, EntityType.PRODUCT_VARIANT),
            compare_at_price=_money(node.compare_at_price),
            inventory_quantity=node.inventory_quantity,
            price=_money(node.price),
            product=self.product(node.product),
            sku=node.sku,
            title=node.title,
            barcode=node.barcode,
            weight=node.weight,
            weight_unit=(
                WeightUnit.from_wire(node.weight_unit) if node.weight_unit is not None else None
            ),
        )

    def products(self, payload: ProductConnectionPayload) -> NodeList[Product]:
        return NodeList(tuple(self.product(edge.node) for edge in payload.edges))  # type: ignore[misc]

    def product_variants(self, payload: VariantConnectionPayload) -> NodeList[ProductVariant]:
        return NodeList(tuple(self.product_variant(edge.node) for edge in payload.edges))  # type: ignore[misc]

    def bulk_operation(self, node: Optional[BulkOperationNode]) -> Optional[BulkOperation]:
        if node is None:
            return None
        object_count = None
        if node.object_count is not None:
            try:
                object_count = int(node.object_count)
            except ValueError:
                raise InvalidScalar(node.object_count, "UnsignedInt64") from None
        return BulkOperation(
            id=_entity_id(node.id, EntityType.BULK_OPERATION),
            status=BulkOperationStatus.from_wire(node.status),
            error_code=node.error_code,
            object_count=object_count,
            url=node.url,
        )

    def _product_update(self, payload: ProductUpdatePayload) -> Optional[Product]:
        return self.product(payload.product)

    def _variant_update(self, payload: VariantUpdatePayload) -> Optional[ProductVariant]:
        return self.product_variant(payload.product_variant)

    def _bulk_operation_run(self, payload: BulkOperationRunPayload) -> Optional[BulkOperation]:
        return self.bulk_operation(payload.bulk_operation)


def _entity_id(raw: str, entity_type: EntityType) -> Id:
    identifier = Id.parse(raw)
    if identifier.entity_type is not entity_type:
        raise ResponseShapeMismatch(entity_type.value, identifier.entity_type.value)
    return identifier


def _money(raw: Any) -> Optional[Money]:
    if raw is None:
        return None
    return Money.parse(raw)
