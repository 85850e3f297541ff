"""
GraphQL support for shopify_gql.

This module provides the typed query builders, the document compiler, the
response decoder and the client for the Shopify Admin GraphQL API.
"""

from .builder import (
    BULK_OPERATION_FIELDS,
    BulkOperationBuilder,
    ProductQueryBuilder,
    ProductSelection,
    ProductVariantQueryBuilder,
    VariantSelection,
)
from .client import ShopifyClient
from .compiler import DocumentCompiler, compile_document, encode_literal
from .entities import BulkOperation, NodeList, Product, ProductVariant
from .envelope import (
    EnvelopeDecoder,
    ErrorEnvelope,
    ResponseEnvelope,
    SuccessEnvelope,
    decode_response,
)
from .identifiers import EntityType, Id
from .materializer import Materializer
from .models import (
    EntityKind,
    GraphQLDocument,
    GraphQLOperationType,
    OperationKind,
    OperationTag,
)
from .scalars import (
    BulkOperationStatus,
    Money,
    ProductStatus,
    WeightUnit,
    WireEnum,
)
from .selection import (
    CompositeField,
    Connection,
    FieldSelectionSet,
    InputAssignmentSet,
    ScalarField,
)
from .transport import AiohttpTransport, Transport

__all__ = [
    # Client
    "ShopifyClient",
    "Transport",
    "AiohttpTransport",
    # Builders
    "ProductQueryBuilder",
    "ProductVariantQueryBuilder",
    "ProductSelection",
    "VariantSelection",
    "BulkOperationBuilder",
    "BULK_OPERATION_FIELDS",
    # Selections
    "Connection",
    "FieldSelectionSet",
    "InputAssignmentSet",
    "ScalarField",
    "CompositeField",
    # Compiler
    "DocumentCompiler",
    "compile_document",
    "encode_literal",
    # Decoding
    "EnvelopeDecoder",
    "SuccessEnvelope",
    "ErrorEnvelope",
    "ResponseEnvelope",
    "Materializer",
    "decode_response",
    # Models
    "GraphQLDocument",
    "GraphQLOperationType",
    "OperationKind",
    "OperationTag",
    "EntityKind",
    # Identifiers and scalars
    "Id",
    "EntityType",
    "Money",
    "WireEnum",
    "WeightUnit",
    "ProductStatus",
    "BulkOperationStatus",
    # Entities
    "Product",
    "ProductVariant",
    "BulkOperation",
    "NodeList",
]
