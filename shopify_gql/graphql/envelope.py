"""
Response envelope decoder.

Turns raw reply bytes into exactly one of the known reply shapes, in two
explicit steps:

1. :meth:`EnvelopeDecoder.parse` matches the body structurally. A body with
   a top-level ``errors`` entry is the error shape; otherwise ``data`` must
   hold a single known root field whose payload validates against that
   field's pydantic model. Anything else is a
   :class:`~shopify_gql.exceptions.TransportDecodeError`.
2. :meth:`EnvelopeDecoder.decode` cross-checks the matched tag against the
   operation that was sent, raising
   :class:`~shopify_gql.exceptions.ResponseShapeMismatch` for a different
   known shape and :class:`~shopify_gql.exceptions.RemoteError` for the error
   shape.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import RemoteError, ResponseShapeMismatch, TransportDecodeError
from .models import OperationTag

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    """Base for reply payload shapes: camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class ProductNode(_Payload):
    id: str
    title: Optional[str] = None
    status: Optional[str] = None
    vendor: Optional[str] = None
    handle: Optional[str] = None
    product_type: Optional[str] = None
    tags: Optional[List[str]] = None
    variants: Optional[VariantConnectionPayload] = None


class VariantNode(_Payload):
    id: str
    compare_at_price: Optional[Union[str, float]] = None
    inventory_quantity: Optional[int] = None
    price: Optional[Union[str, float]] = None
    product: Optional[ProductNode] = None
    sku: Optional[str] = None
    title: Optional[str] = None
    barcode: Optional[str] = None
    weight: Optional[float] = None
    weight_unit: Optional[str] = None


class ProductEdge(_Payload):
    node: ProductNode


class VariantEdge(_Payload):
    node: VariantNode


class ProductConnectionPayload(_Payload):
    edges: List[ProductEdge]


class VariantConnectionPayload(_Payload):
    edges: List[VariantEdge]


class ProductUpdatePayload(_Payload):
    product: Optional[ProductNode] = None


class VariantUpdatePayload(_Payload):
    product_variant: Optional[VariantNode] = None


class BulkOperationNode(_Payload):
    id: str
    status: str
    error_code: Optional[str] = None
    object_count: Optional[Union[int, str]] = None
    url: Optional[str] = None


class BulkOperationRunPayload(_Payload):
    bulk_operation: Optional[BulkOperationNode] = None


for _model in (
    ProductNode,
    VariantNode,
    ProductEdge,
    VariantEdge,
    ProductConnectionPayload,
    VariantConnectionPayload,
    ProductUpdatePayload,
    VariantUpdatePayload,
):
    _model.model_rebuild()

# Reply payload model per root field.
SHAPES: Dict[OperationTag, Type[_Payload]] = {
    OperationTag.PRODUCT: ProductNode,
    OperationTag.PRODUCT_UPDATE: ProductUpdatePayload,
    OperationTag.PRODUCT_VARIANT: VariantNode,
    OperationTag.PRODUCT_VARIANT_UPDATE: VariantUpdatePayload,
    OperationTag.PRODUCTS: ProductConnectionPayload,
    OperationTag.PRODUCT_VARIANTS: VariantConnectionPayload,
    OperationTag.BULK_OPERATION_RUN_QUERY: BulkOperationRunPayload,
    OperationTag.CURRENT_BULK_OPERATION: BulkOperationNode,
}

# Root fields that are null when nothing matches.
NULLABLE = frozenset(
    {
        OperationTag.PRODUCT,
        OperationTag.PRODUCT_VARIANT,
        OperationTag.CURRENT_BULK_OPERATION,
    }
)


@dataclass(frozen=True)
class SuccessEnvelope:
    """A successful reply, tagged with the root field that produced it."""

    operation: OperationTag
    payload: Optional[_Payload]
    extensions: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ErrorEnvelope:
    """A reply carrying top-level errors."""

    errors: Any
    data: Optional[Any] = None


ResponseEnvelope = Union[SuccessEnvelope, ErrorEnvelope]


class EnvelopeDecoder:
    """Decodes raw reply bytes into a :data:`ResponseEnvelope`."""

    def parse(self, raw: Union[bytes, str]) -> ResponseEnvelope:
        """
        Match the reply against the known shapes.

        Args:
            raw: Reply body

        Returns:
            SuccessEnvelope or ErrorEnvelope

        Raises:
            TransportDecodeError: If the body matches no known shape
        """
        raw_body = raw if isinstance(raw, bytes) else raw.encode("utf-8")

        try:
            body = json.loads(raw_body)
        except ValueError as e:
            raise TransportDecodeError(raw_body, f"invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise TransportDecodeError(raw_body, "top-level value is not an object")

        errors = body.get("errors")
        if errors:
            logger.debug("Reply matched the error shape")
            return ErrorEnvelope(errors=errors, data=body.get("data"))

        data = body.get("data")
        if not isinstance(data, dict) or len(data) != 1:
            raise TransportDecodeError(raw_body, "expected exactly one root field under 'data'")

        ((key, payload),) = data.items()
        try:
            operation = OperationTag(key)
        except ValueError:
            raise TransportDecodeError(raw_body, f"unknown root field {key!r}") from None

        if payload is None:
            if operation not in NULLABLE:
                raise TransportDecodeError(raw_body, f"{key!r} payload is null")
            logger.debug("Reply matched the %s shape with a null payload", key)
            return SuccessEnvelope(operation, None, body.get("extensions"))

        try:
            model = SHAPES[operation].model_validate(payload)
        except ValidationError as e:
            raise TransportDecodeError(raw_body, f"{key!r} payload: {e}") from e

        logger.debug("Reply matched the %s shape", key)
        return SuccessEnvelope(operation, model, body.get("extensions"))

    def decode(self, raw: Union[bytes, str], expected: OperationTag) -> SuccessEnvelope:
        """
        Match the reply and check it answers the operation that was sent.

        Args:
            raw: Reply body
            expected: Root field of the sent document

        Returns:
            The success envelope

        Raises:
            RemoteError: If the reply is the error shape
            ResponseShapeMismatch: If the reply is a different known shape
            TransportDecodeError: If the body matches no known shape
        """
        envelope = self.parse(raw)

        if isinstance(envelope, ErrorEnvelope):
            raise RemoteError(envelope.errors)

        if envelope.operation is not expected:
            logger.warning(
                "Expected a %s reply, got %s", expected.value, envelope.operation.value
            )
            raise ResponseShapeMismatch(expected.value, envelope.operation.value)

        return envelope


def decode_response(raw: Union[bytes, str], expected: OperationTag) -> Any:
    """
    Decode a reply and materialize the entity it carries.

    Args:
        raw: Reply body
        expected: Root field of the sent document

    Returns:
        The materialized entity (see :class:`Materializer`)
    """
    from .materializer import Materializer

    return Materializer().materialize(EnvelopeDecoder().decode(raw, expected))
