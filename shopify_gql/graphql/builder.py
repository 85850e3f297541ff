"""
GraphQL query builders.

This module provides fluent, immutable builders for the Product and
ProductVariant queries and mutations of the Shopify Admin API, plus bulk
operation documents.

Every selector returns a new builder value; the receiver is left untouched.
Update-only methods raise :class:`~shopify_gql.exceptions.BuilderMisuse` on a
read or connection builder.

Products and variants reference each other (a product lists its variants, a
variant points back at its product). To keep that relation from turning into
an endlessly nested document, each direction takes a restricted selection
type: :meth:`ProductQueryBuilder.with_variants` takes a
:class:`VariantSelection`, which has no ``with_product``, and
:meth:`ProductVariantQueryBuilder.with_product` takes a
:class:`ProductSelection`, which has no ``with_variants``. Full builders are
accepted as well, but are rejected with
:class:`~shopify_gql.exceptions.CycleRejected` if they select back into the
embedding kind at any depth.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from ..exceptions import (
    BuilderMisuse,
    CycleRejected,
    InvalidConnection,
    InvalidIdentifier,
    InvalidScalar,
)
from .compiler import DocumentCompiler
from .identifiers import EntityType, Id
from .models import EntityKind, GraphQLDocument, OperationKind, OperationTag
from .scalars import Money, ProductStatus, WeightUnit
from .selection import (
    CompositeField,
    Connection,
    FieldSelectionSet,
    InputAssignmentSet,
    ScalarField,
)

if TYPE_CHECKING:
    from .client import ShopifyClient

S = TypeVar("S", bound="_Selection")
B = TypeVar("B", bound="_QueryBuilder")

_compiler = DocumentCompiler()


def _id_only() -> FieldSelectionSet:
    return FieldSelectionSet.of("id")


@dataclass(frozen=True)
class _Selection:
    """Fields selected on one entity."""

    fields: FieldSelectionSet = field(default_factory=_id_only)

    entity_kind: ClassVar[EntityKind]

    def _select(self: S, name: str) -> S:
        return replace(self, fields=self.fields.add(ScalarField(name)))

    def _embed(self: S, call: str, token: CompositeField) -> S:
        existing = self.fields.find(token.name)
        if existing is not None and existing != token:
            raise BuilderMisuse(
                self._kind_label,
                call,
                f"{token.name} is already selected with a different sub-selection",
            )
        return replace(self, fields=self.fields.add(token))

    @property
    def _kind_label(self) -> str:
        return OperationKind.READ.value


class _ProductFields:
    """Field selectors shared by every product selection."""

    def with_title(self: S) -> S:
        return self._select("title")

    def with_status(self: S) -> S:
        return self._select("status")

    def with_vendor(self: S) -> S:
        return self._select("vendor")

    def with_handle(self: S) -> S:
        return self._select("handle")

    def with_product_type(self: S) -> S:
        return self._select("productType")

    def with_tags(self: S) -> S:
        return self._select("tags")


class _VariantFields:
    """Field selectors shared by every variant selection."""

    def with_compare_at_price(self: S) -> S:
        return self._select("compareAtPrice")

    def with_inventory_quantity(self: S) -> S:
        return self._select("inventoryQuantity")

    def with_price(self: S) -> S:
        return self._select("price")

    def with_sku(self: S) -> S:
        return self._select("sku")

    def with_title(self: S) -> S:
        return self._select("title")

    def with_barcode(self: S) -> S:
        return self._select("barcode")

    def with_weight(self: S) -> S:
        return self._select("weight")

    def with_weight_unit(self: S) -> S:
        return self._select("weightUnit")


@dataclass(frozen=True)
class ProductSelection(_ProductFields, _Selection):
    """
    Product fields to fetch beneath a variant.

    Has no ``with_variants``: a variant's product cannot list variants again.

    Examples:
        ```python
        ProductVariantQueryBuilder.for_read(variant_id).with_product(
            ProductSelection().with_title().with_vendor()
        )
        ```
    """

    entity_kind: ClassVar[EntityKind] = EntityKind.PRODUCT


@dataclass(frozen=True)
class VariantSelection(_VariantFields, _Selection):
    """
    Variant fields to fetch beneath a product, as a bounded connection.

    Has no ``with_product``: a product's variants cannot select the product
    again.
    """

    connection: Optional[Connection] = None

    entity_kind: ClassVar[EntityKind] = EntityKind.PRODUCT_VARIANT

    def __post_init__(self) -> None:
        if self.connection is None:
            raise InvalidConnection(None, None)

    @classmethod
    def first(cls, count: int) -> VariantSelection:
        return cls(connection=Connection.first(count))

    @classmethod
    def last(cls, count: int) -> VariantSelection:
        return cls(connection=Connection.last(count))


@dataclass(frozen=True)
class _QueryBuilder(_Selection):
    """
    Request state for one entity and operation.

    Attributes:
        operation_kind: Read, update or connection
        identifier: Entity id for read and update builders
        connection: Bounds for connection builders
        inputs: Input assignments; only update builders have them
    """

    operation_kind: OperationKind = OperationKind.READ
    identifier: Optional[Id] = None
    connection: Optional[Connection] = None
    inputs: Optional[InputAssignmentSet] = None

    entity_type: ClassVar[EntityType]
    operation_tags: ClassVar[Dict[OperationKind, OperationTag]]

    @classmethod
    def for_read(cls: type[B], identifier: Id) -> B:
        """
        Create a builder reading one entity by id.

        The ``id`` field is always selected.
        """
        cls._check_identifier(OperationKind.READ, "for_read", identifier)
        return cls(operation_kind=OperationKind.READ, identifier=identifier)

    @classmethod
    def for_update(cls: type[B], identifier: Id) -> B:
        """
        Create a builder updating one entity.

        The input assignments are seeded with the identifier; only builders
        created here accept ``update_*`` calls.
        """
        cls._check_identifier(OperationKind.UPDATE, "for_update", identifier)
        return cls(
            operation_kind=OperationKind.UPDATE,
            identifier=identifier,
            inputs=InputAssignmentSet().assign("id", identifier),
        )

    @classmethod
    def for_connection(
        cls: type[B],
        connection: Optional[Connection] = None,
        *,
        first: Optional[int] = None,
        last: Optional[int] = None,
    ) -> B:
        """
        Create a builder reading a bounded list of entities.

        Args:
            connection: Prebuilt bounds, or
            first: Number of entities from the start of the list, or
            last: Number of entities from the end of the list

        Raises:
            InvalidConnection: Unless exactly one positive count is given
        """
        if connection is None:
            connection = Connection(first=first, last=last)
        elif first is not None or last is not None:
            raise InvalidConnection(first, last)
        return cls(operation_kind=OperationKind.CONNECTION, connection=connection)

    @classmethod
    def _check_identifier(cls, kind: OperationKind, call: str, identifier: Id) -> None:
        if not isinstance(identifier, Id) or identifier.entity_type is not cls.entity_type:
            raise BuilderMisuse(
                kind.value,
                call,
                f"expected a {cls.entity_type.value} identifier, got {identifier!s}",
            )

    @property
    def operation(self) -> OperationTag:
        """Root field of the compiled document, and the reply shape to expect."""
        return self.operation_tags[self.operation_kind]

    @property
    def _kind_label(self) -> str:
        return self.operation_kind.value

    def _assign(
        self: B,
        call: str,
        key: str,
        value: Any,
        convert: Optional[Callable[[Any], Any]] = None,
    ) -> B:
        # Kind is checked before the value is converted.
        if self.operation_kind is not OperationKind.UPDATE or self.inputs is None:
            raise BuilderMisuse(self.operation_kind.value, call)
        if convert is not None:
            value = convert(value)
        return replace(self, inputs=self.inputs.assign(key, value))

    def compile(self) -> str:
        """Compile into a document string."""
        return _compiler.compile(self)

    def build(self) -> GraphQLDocument:
        """Compile into a document paired with the reply shape it expects."""
        return _compiler.build(self)

    async def execute(self, client: ShopifyClient) -> Any:
        """
        Send the compiled document and return the materialized entity.

        Args:
            client: Client to send through

        Returns:
            The entity, a NodeList for connections, or None when a read
            finds nothing
        """
        return await client.execute(self)


@dataclass(frozen=True)
class ProductQueryBuilder(_ProductFields, _QueryBuilder):
    """
    Builds ``product``, ``productUpdate`` and ``products`` documents.

    Examples:
        Read:
        ```python
        builder = (ProductQueryBuilder.for_read(Id.product("7343141159089"))
            .with_title()
            .with_vendor())
        builder.compile()
        # 'query { product(id: "gid://shopify/Product/7343141159089") { id,title,vendor } }'
        ```

        Update:
        ```python
        builder = ProductQueryBuilder.for_update(product_id).update_title("MY TITLE")
        ```

        With variants:
        ```python
        builder = (ProductQueryBuilder.for_read(product_id)
            .with_variants(VariantSelection.first(1).with_price().with_sku()))
        ```
    """

    entity_kind: ClassVar[EntityKind] = EntityKind.PRODUCT
    entity_type: ClassVar[EntityType] = EntityType.PRODUCT
    operation_tags: ClassVar[Dict[OperationKind, OperationTag]] = {
        OperationKind.READ: OperationTag.PRODUCT,
        OperationKind.UPDATE: OperationTag.PRODUCT_UPDATE,
        OperationKind.CONNECTION: OperationTag.PRODUCTS,
    }

    def with_variants(
        self, variants: Union[VariantSelection, ProductVariantQueryBuilder]
    ) -> ProductQueryBuilder:
        """
        Select the product's variants.

        Args:
            variants: A VariantSelection, or a connection ProductVariantQueryBuilder

        Raises:
            BuilderMisuse: If a non-connection builder is given
            CycleRejected: If the variant selection selects a product
        """
        if isinstance(variants, ProductVariantQueryBuilder):
            if variants.operation_kind is not OperationKind.CONNECTION:
                raise BuilderMisuse(
                    variants.operation_kind.value,
                    "with_variants",
                    "only a connection selection can be embedded",
                )
        elif not isinstance(variants, VariantSelection):
            raise TypeError(f"Expected a variant selection, got {type(variants).__name__}")

        if EntityKind.PRODUCT in variants.fields.reachable_kinds:
            raise CycleRejected(EntityKind.PRODUCT.value)

        token = CompositeField(
            name="variants",
            entity_kind=EntityKind.PRODUCT_VARIANT,
            selection=variants.fields,
            connection=variants.connection,
        )
        return self._embed("with_variants", token)

    def update_title(self, title: str) -> ProductQueryBuilder:
        return self._assign("update_title", "title", str(title))

    def update_status(self, status: Union[ProductStatus, str]) -> ProductQueryBuilder:
        return self._assign("update_status", "status", status, ProductStatus.from_wire)

    def update_vendor(self, vendor: str) -> ProductQueryBuilder:
        return self._assign("update_vendor", "vendor", str(vendor))

    def update_handle(self, handle: str) -> ProductQueryBuilder:
        return self._assign("update_handle", "handle", str(handle))

    def update_product_type(self, product_type: str) -> ProductQueryBuilder:
        return self._assign("update_product_type", "productType", str(product_type))

    def update_tags(self, tags: Sequence[str]) -> ProductQueryBuilder:
        return self._assign("update_tags", "tags", tags, _as_tags)


@dataclass(frozen=True)
class ProductVariantQueryBuilder(_VariantFields, _QueryBuilder):
    """
    Builds ``productVariant``, ``productVariantUpdate`` and ``productVariants``
    documents.
    """

    entity_kind: ClassVar[EntityKind] = EntityKind.PRODUCT_VARIANT
    entity_type: ClassVar[EntityType] = EntityType.PRODUCT_VARIANT
    operation_tags: ClassVar[Dict[OperationKind, OperationTag]] = {
        OperationKind.READ: OperationTag.PRODUCT_VARIANT,
        OperationKind.UPDATE: OperationTag.PRODUCT_VARIANT_UPDATE,
        OperationKind.CONNECTION: OperationTag.PRODUCT_VARIANTS,
    }

    def with_product(
        self, product: Union[ProductSelection, ProductQueryBuilder]
    ) -> ProductVariantQueryBuilder:
        """
        Select the variant's owning product.

        Args:
            product: A ProductSelection, or a read ProductQueryBuilder (its
                identifier is ignored)

        Raises:
            BuilderMisuse: If an update or connection builder is given
            CycleRejected: If the product selection selects variants
        """
        if isinstance(product, ProductQueryBuilder):
            if product.operation_kind is not OperationKind.READ:
                raise BuilderMisuse(
                    product.operation_kind.value,
                    "with_product",
                    "only a read selection can be embedded",
                )
        elif not isinstance(product, ProductSelection):
            raise TypeError(f"Expected a product selection, got {type(product).__name__}")

        if EntityKind.PRODUCT_VARIANT in product.fields.reachable_kinds:
            raise CycleRejected(EntityKind.PRODUCT_VARIANT.value)

        token = CompositeField(
            name="product",
            entity_kind=EntityKind.PRODUCT,
            selection=product.fields,
        )
        return self._embed("with_product", token)

    def update_compare_at_price(
        self, compare_at_price: Union[Money, float, str]
    ) -> ProductVariantQueryBuilder:
        return self._assign(
            "update_compare_at_price", "compareAtPrice", compare_at_price, _as_money
        )

    def update_price(self, price: Union[Money, float, str]) -> ProductVariantQueryBuilder:
        return self._assign("update_price", "price", price, _as_money)

    def update_sku(self, sku: str) -> ProductVariantQueryBuilder:
        return self._assign("update_sku", "sku", str(sku))

    def update_barcode(self, barcode: str) -> ProductVariantQueryBuilder:
        return self._assign("update_barcode", "barcode", str(barcode))

    def update_weight(self, weight: float) -> ProductVariantQueryBuilder:
        return self._assign("update_weight", "weight", weight, _as_weight)

    def update_weight_unit(
        self, weight_unit: Union[WeightUnit, str]
    ) -> ProductVariantQueryBuilder:
        return self._assign(
            "update_weight_unit", "weightUnit", weight_unit, WeightUnit.from_wire
        )

    def update_inventory_quantities(
        self, inventory_quantities: Iterable[Tuple[int, Union[Id, str]]]
    ) -> ProductVariantQueryBuilder:
        """
        Set available quantities per location.

        Args:
            inventory_quantities: ``(available_quantity, location)`` pairs;
                a location is a Location Id or its numeric part
        """
        return self._assign(
            "update_inventory_quantities",
            "inventoryQuantities",
            inventory_quantities,
            _as_quantities,
        )


def _as_money(value: Union[Money, float, str]) -> Money:
    if isinstance(value, Money):
        return value
    return Money.parse(value)


def _as_tags(tags: Union[Sequence[str], str]) -> List[str]:
    if isinstance(tags, str):
        return [tags]
    return [str(tag) for tag in tags]


def _as_weight(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidScalar(value, "Float") from None


def _as_quantities(
    inventory_quantities: Iterable[Tuple[int, Union[Id, str]]]
) -> List[Dict[str, Any]]:
    quantities = []
    for available, location in inventory_quantities:
        if not isinstance(location, Id):
            location = Id.location(location)
        elif location.entity_type is not EntityType.LOCATION:
            raise InvalidIdentifier(str(location))
        try:
            count = int(available)
        except (TypeError, ValueError):
            raise InvalidScalar(available, "Int") from None
        quantities.append({"availableQuantity": count, "locationId": location})
    return quantities


BULK_OPERATION_FIELDS = ("id", "status", "errorCode", "objectCount", "url")


@dataclass(frozen=True)
class BulkOperationBuilder:
    """
    Builds bulk operation documents.

    ``run_query`` wraps a connection builder in ``bulkOperationRunQuery``;
    the connection's first/last count is dropped, as bulk queries always
    cover the whole list. ``current`` reads the shop's current bulk operation.
    Polling for completion is left to the caller.
    """

    operation: OperationTag
    inner: Optional[Union[ProductQueryBuilder, ProductVariantQueryBuilder]] = None
    fields: FieldSelectionSet = field(
        default_factory=lambda: FieldSelectionSet.of(*BULK_OPERATION_FIELDS)
    )

    entity_kind: ClassVar[EntityKind] = EntityKind.BULK_OPERATION
    identifier: ClassVar[Optional[Id]] = None
    connection: ClassVar[Optional[Connection]] = None
    inputs: ClassVar[Optional[InputAssignmentSet]] = None

    @classmethod
    def run_query(
        cls, builder: Union[ProductQueryBuilder, ProductVariantQueryBuilder]
    ) -> BulkOperationBuilder:
        """
        Start a bulk query over a connection.

        Raises:
            BuilderMisuse: If the builder is not a connection builder
        """
        if not isinstance(builder, _QueryBuilder) or (
            builder.operation_kind is not OperationKind.CONNECTION
        ):
            label = getattr(getattr(builder, "operation_kind", None), "value", "unknown")
            raise BuilderMisuse(label, "run_query", "a connection builder is required")
        return cls(operation=OperationTag.BULK_OPERATION_RUN_QUERY, inner=builder)

    @classmethod
    def current(cls) -> BulkOperationBuilder:
        return cls(operation=OperationTag.CURRENT_BULK_OPERATION)

    @property
    def operation_kind(self) -> OperationKind:
        if self.operation is OperationTag.BULK_OPERATION_RUN_QUERY:
            return OperationKind.UPDATE
        return OperationKind.READ

    def compile(self) -> str:
        return _compiler.compile(self)

    def build(self) -> GraphQLDocument:
        return _compiler.build(self)

    async def execute(self, client: ShopifyClient) -> Any:
        return await client.execute(self)
