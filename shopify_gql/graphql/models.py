"""
GraphQL models and data structures.

This module defines the enums shared by the builders, the document compiler
and the response decoder, plus the compiled document value itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class GraphQLOperationType(str, Enum):
    """GraphQL operation types."""

    QUERY = "query"
    MUTATION = "mutation"


class OperationKind(str, Enum):
    """What a builder was created for."""

    READ = "read"
    UPDATE = "update"
    CONNECTION = "connection"


class EntityKind(str, Enum):
    """Entity kinds a builder can select fields of."""

    PRODUCT = "Product"
    PRODUCT_VARIANT = "ProductVariant"
    BULK_OPERATION = "BulkOperation"


class OperationTag(str, Enum):
    """
    Root fields of the known reply shapes.

    The value is the key under ``data`` in a successful reply, so it doubles
    as the tag of the reply's success shape.
    """

    PRODUCT = "product"
    PRODUCT_UPDATE = "productUpdate"
    PRODUCT_VARIANT = "productVariant"
    PRODUCT_VARIANT_UPDATE = "productVariantUpdate"
    PRODUCTS = "products"
    PRODUCT_VARIANTS = "productVariants"
    BULK_OPERATION_RUN_QUERY = "bulkOperationRunQuery"
    CURRENT_BULK_OPERATION = "currentBulkOperation"

    @property
    def operation_type(self) -> GraphQLOperationType:
        """Get whether this root field lives on the mutation or query type."""
        if self in _MUTATIONS:
            return GraphQLOperationType.MUTATION
        return GraphQLOperationType.QUERY


_MUTATIONS = frozenset(
    {
        OperationTag.PRODUCT_UPDATE,
        OperationTag.PRODUCT_VARIANT_UPDATE,
        OperationTag.BULK_OPERATION_RUN_QUERY,
    }
)


@dataclass(frozen=True)
class GraphQLDocument:
    """A compiled query or mutation and the reply shape it expects."""

    text: str
    operation: OperationTag

    @property
    def operation_type(self) -> GraphQLOperationType:
        return self.operation.operation_type

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"query": self.text}

    def __str__(self) -> str:
        return self.text
