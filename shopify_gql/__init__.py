"""
Typed async client for the Shopify Admin GraphQL API.

This package builds Product and ProductVariant queries and mutations with
immutable fluent builders, compiles them to deterministic GraphQL documents,
sends them over aiohttp and decodes the replies into typed entities.

Features:
- Validated gid identifiers and strict scalar decoding
- Builders that reject update calls on read builders and selection cycles
- Reply decoding that checks the answer matches the operation sent
- Configuration from files and environment variables with Pydantic
"""

from .config import ConfigLoader, LoggingConfig, ShopifyConfig
from .exceptions import (
    AuthenticationError,
    BuilderMisuse,
    ConfigurationError,
    CycleRejected,
    DecodeError,
    InvalidConnection,
    InvalidIdentifier,
    InvalidScalar,
    RemoteError,
    ResponseShapeMismatch,
    ShopifyGQLError,
    TransportDecodeError,
    TransportError,
    TransportTimeoutError,
)
from .graphql import (
    BulkOperation,
    BulkOperationBuilder,
    BulkOperationStatus,
    Connection,
    DocumentCompiler,
    EnvelopeDecoder,
    ErrorEnvelope,
    GraphQLDocument,
    Id,
    Money,
    NodeList,
    OperationTag,
    Product,
    ProductQueryBuilder,
    ProductSelection,
    ProductStatus,
    ProductVariant,
    ProductVariantQueryBuilder,
    ShopifyClient,
    SuccessEnvelope,
    VariantSelection,
    WeightUnit,
)
from .logging import setup_logging

__version__ = "0.1.0"

__all__ = [
    # Client
    "ShopifyClient",
    "ShopifyConfig",
    "LoggingConfig",
    "ConfigLoader",
    "setup_logging",
    # Builders
    "ProductQueryBuilder",
    "ProductVariantQueryBuilder",
    "ProductSelection",
    "VariantSelection",
    "BulkOperationBuilder",
    "Connection",
    "DocumentCompiler",
    "GraphQLDocument",
    "EnvelopeDecoder",
    "SuccessEnvelope",
    "ErrorEnvelope",
    "OperationTag",
    # Values
    "Id",
    "Money",
    "WeightUnit",
    "ProductStatus",
    "BulkOperationStatus",
    "Product",
    "ProductVariant",
    "BulkOperation",
    "NodeList",
    # Exceptions
    "ShopifyGQLError",
    "InvalidIdentifier",
    "InvalidScalar",
    "BuilderMisuse",
    "InvalidConnection",
    "CycleRejected",
    "DecodeError",
    "ResponseShapeMismatch",
    "TransportDecodeError",
    "RemoteError",
    "ConfigurationError",
    "AuthenticationError",
    "TransportError",
    "TransportTimeoutError",
]
