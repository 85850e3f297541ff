"""
Globally-unique identifiers.

Shopify addresses every entity with a ``gid://shopify/<Type>/<digits>``
string. :class:`Id` validates the numeric part once, at construction, and
renders the canonical string from it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..exceptions import InvalidIdentifier

NAMESPACE = "shopify"

_GID_PATTERN = re.compile(
    r"^gid://(?P<namespace>[A-Za-z0-9_-]+)/(?P<type>[A-Za-z]+)/(?P<number>[^/?]*)$"
)


class EntityType(str, Enum):
    """Entity types that can appear in an identifier."""

    PRODUCT = "Product"
    PRODUCT_VARIANT = "ProductVariant"
    LOCATION = "Location"
    BULK_OPERATION = "BulkOperation"


@dataclass(frozen=True)
class Id:
    """
    A globally-unique identifier.

    Two identifiers are equal iff their canonical strings match.

    Attributes:
        entity_type: Type tag of the referenced entity
        number: Validated decimal digits, kept verbatim
        namespace: gid namespace (``shopify`` for everything the API returns)
    """

    entity_type: EntityType
    number: str
    namespace: str = NAMESPACE

    @classmethod
    def for_type(cls, entity_type: EntityType, raw_id: str) -> Id:
        """
        Create an identifier for an entity type.

        Args:
            entity_type: Type tag of the referenced entity
            raw_id: Numeric payload

        Returns:
            Validated identifier

        Raises:
            InvalidIdentifier: If ``raw_id`` is empty or contains a non-digit, or
                ``entity_type`` is not a known type
        """
        # str.isdigit() accepts superscripts and other Unicode digits
        if not isinstance(raw_id, str) or not (raw_id.isascii() and raw_id.isdigit()):
            raise InvalidIdentifier(str(raw_id))
        try:
            entity_type = EntityType(entity_type)
        except ValueError:
            raise InvalidIdentifier(f"{entity_type}/{raw_id}") from None
        return cls(entity_type, raw_id)

    @classmethod
    def product(cls, raw_id: str) -> Id:
        return cls.for_type(EntityType.PRODUCT, raw_id)

    @classmethod
    def product_variant(cls, raw_id: str) -> Id:
        return cls.for_type(EntityType.PRODUCT_VARIANT, raw_id)

    @classmethod
    def location(cls, raw_id: str) -> Id:
        return cls.for_type(EntityType.LOCATION, raw_id)

    @classmethod
    def bulk_operation(cls, raw_id: str) -> Id:
        return cls.for_type(EntityType.BULK_OPERATION, raw_id)

    @classmethod
    def parse(cls, gid: str) -> Id:
        """
        Parse a canonical ``gid://`` string.

        Raises:
            InvalidIdentifier: If the string is not a well-formed gid of a
                known entity type
        """
        match = _GID_PATTERN.match(gid) if isinstance(gid, str) else None
        if match is None:
            raise InvalidIdentifier(str(gid))
        try:
            entity_type = EntityType(match.group("type"))
        except ValueError:
            raise InvalidIdentifier(gid) from None
        identifier = cls.for_type(entity_type, match.group("number"))
        if match.group("namespace") != NAMESPACE:
            identifier = cls(entity_type, identifier.number, match.group("namespace"))
        return identifier

    @property
    def gid(self) -> str:
        """Canonical string form."""
        return f"gid://{self.namespace}/{self.entity_type.value}/{self.number}"

    def __str__(self) -> str:
        return self.gid
