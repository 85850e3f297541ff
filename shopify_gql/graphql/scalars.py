"""
Scalar codec.

Typed leaf values returned by or sent to the Admin API. Parsing from the wire
is strict: malformed money strings and unknown enum tags raise
:class:`~shopify_gql.exceptions.InvalidScalar` instead of falling back to a
default.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Type, TypeVar

from ..exceptions import InvalidScalar

E = TypeVar("E", bound="WireEnum")

_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class WireEnum(str, Enum):
    """A closed enumeration rendered as a bare GraphQL enum literal."""

    @classmethod
    def from_wire(cls: Type[E], tag: Any) -> E:
        """
        Decode a wire tag.

        Args:
            tag: Enum value as returned by the API

        Returns:
            Matching member

        Raises:
            InvalidScalar: If the tag is not a member of the enumeration
        """
        try:
            return cls(tag)
        except ValueError:
            raise InvalidScalar(tag, cls.__name__) from None


class WeightUnit(WireEnum):
    """Units of measurement for weight."""

    # Metric system unit of mass.
    GRAMS = "GRAMS"
    # 1 kilogram equals 1000 grams.
    KILOGRAMS = "KILOGRAMS"
    # Imperial system unit of mass.
    OUNCES = "OUNCES"
    # 1 pound equals 16 ounces.
    POUNDS = "POUNDS"


class ProductStatus(WireEnum):
    """The possible product statuses."""

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    DRAFT = "DRAFT"


class BulkOperationStatus(WireEnum):
    """Status of a bulk operation."""

    CANCELED = "CANCELED"
    CANCELING = "CANCELING"
    COMPLETED = "COMPLETED"
    CREATED = "CREATED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"
    RUNNING = "RUNNING"


@dataclass(frozen=True)
class Money:
    """A decimal money amount, as the API's ``Money`` scalar."""

    amount: float

    @classmethod
    def parse(cls, raw: Any) -> Money:
        """
        Parse a money amount from its wire form.

        Args:
            raw: Decimal string such as ``"42.99"``

        Returns:
            Parsed amount

        Raises:
            InvalidScalar: If ``raw`` is not a finite decimal number
        """
        if isinstance(raw, str):
            if not _DECIMAL_PATTERN.match(raw):
                raise InvalidScalar(raw, "Money")
        elif isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise InvalidScalar(raw, "Money")
        amount = float(raw)
        if not math.isfinite(amount):
            raise InvalidScalar(raw, "Money")
        return cls(amount)

    def to_literal(self) -> str:
        return repr(self.amount)

    def __str__(self) -> str:
        return self.to_literal()

