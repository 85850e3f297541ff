"""
Typed entities returned by the client.

Every field other than ``id`` is optional: ``None`` means the field was not
requested or the API did not return it, which is distinct from a zero or
empty value.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Generic, Iterator, Optional, Tuple, TypeVar

from .identifiers import Id
from .scalars import BulkOperationStatus, Money, ProductStatus, WeightUnit

T = TypeVar("T")


@dataclass(frozen=True)
class NodeList(Generic[T]):
    """The nodes of a connection, in reply order."""

    nodes: Tuple[T, ...] = ()

    def get_node(self, index: int) -> T:
        return self.nodes[index]

    def __getitem__(self, index: int) -> T:
        return self.nodes[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


class _Entity:
    def fetched_fields(self) -> Tuple[str, ...]:
        """Names of the fields that carry a value."""
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is not None)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Product(_Entity):
    """A product sold by the shop."""

    id: Id
    title: Optional[str] = None
    status: Optional[ProductStatus] = None
    vendor: Optional[str] = None
    handle: Optional[str] = None
    product_type: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    # Only the variants of this product; never shared with another Product.
    variants: Optional[NodeList[ProductVariant]] = field(default=None, repr=False)


@dataclass(frozen=True)
class ProductVariant(_Entity):
    """A purchasable version of a product, such as a size or colour."""

    id: Id
    compare_at_price: Optional[Money] = None
    inventory_quantity: Optional[int] = None
    price: Optional[Money] = None
    product: Optional[Product] = field(default=None, repr=False)
    sku: Optional[str] = None
    title: Optional[str] = None
    barcode: Optional[str] = None
    weight: Optional[float] = None
    weight_unit: Optional[WeightUnit] = None


@dataclass(frozen=True)
class BulkOperation(_Entity):
    """An asynchronous bulk query or mutation run by the API."""

    id: Id
    status: BulkOperationStatus
    error_code: Optional[str] = None
    object_count: Optional[int] = None
    url: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.status in (
            BulkOperationStatus.COMPLETED,
            BulkOperationStatus.CANCELED,
            BulkOperationStatus.EXPIRED,
            BulkOperationStatus.FAILED,
        )
