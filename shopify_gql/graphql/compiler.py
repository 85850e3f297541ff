"""
Document compiler.

Renders a builder's accumulated state into a single ``query { ... }`` or
``mutation { ... }`` document. Values are inlined as literals; no variables
are declared. Output is a pure function of the builder's selection order, so
the same chain of selector calls always compiles to the same bytes.
"""

from __future__ import annotations

import json
import logging
import math
from enum import Enum
from typing import Any, Optional, Protocol

from ..exceptions import BuilderMisuse, CycleRejected
from .identifiers import Id
from .models import EntityKind, GraphQLDocument, OperationKind, OperationTag
from .scalars import Money
from .selection import (
    CompositeField,
    Connection,
    FieldSelectionSet,
    InputAssignmentSet,
)

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","
INPUT_SEPARATOR = ", "


class CompilableBuilder(Protocol):
    """What the compiler reads from a builder."""

    @property
    def entity_kind(self) -> EntityKind: ...

    @property
    def operation_kind(self) -> OperationKind: ...

    @property
    def operation(self) -> OperationTag: ...

    @property
    def identifier(self) -> Optional[Id]: ...

    @property
    def connection(self) -> Optional[Connection]: ...

    @property
    def fields(self) -> FieldSelectionSet: ...

    @property
    def inputs(self) -> Optional[InputAssignmentSet]: ...


def encode_literal(value: Any) -> str:
    """
    Encode a Python value as a GraphQL literal.

    Strings are quoted and escaped, numbers are left bare, enums render as
    bare identifiers, identifiers as their quoted gid, lists and dicts as
    GraphQL list and input-object literals.

    Args:
        value: Value to encode

    Returns:
        GraphQL literal text

    Raises:
        TypeError: If the value has no literal form
    """
    if isinstance(value, Enum):
        return str(value.value)
    elif isinstance(value, Id):
        return json.dumps(value.gid)
    elif isinstance(value, Money):
        return value.to_literal()
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise TypeError(f"Non-finite number has no GraphQL literal: {value!r}")
        return repr(value)
    elif isinstance(value, str):
        return json.dumps(value)
    elif isinstance(value, (list, tuple)):
        items = [encode_literal(item) for item in value]
        return f"[{', '.join(items)}]"
    elif isinstance(value, dict):
        items = [f"{key}: {encode_literal(val)}" for key, val in value.items()]
        return f"{{ {', '.join(items)} }}"
    elif value is None:
        return "null"
    else:
        raise TypeError(f"No GraphQL literal for {type(value).__name__}: {value!r}")


def render_fields(fields: FieldSelectionSet) -> str:
    """Render a selection as the comma-joined body of a ``{ ... }`` block."""
    rendered = []
    for token in fields:
        if isinstance(token, CompositeField):
            rendered.append(render_composite(token))
        else:
            rendered.append(token.name)
    return FIELD_SEPARATOR.join(rendered)


def render_composite(token: CompositeField) -> str:
    body = render_fields(token.selection)
    if token.connection is not None:
        return (
            f"{token.name}({token.connection.render()}) "
            f"{{ edges {{ node {{ {body} }} }} }}"
        )
    return f"{token.name} {{ {body} }}"


def check_cycles(entity_kind: EntityKind, fields: FieldSelectionSet) -> None:
    """
    Reject selections that select back into an enclosing entity kind.

    Raises:
        CycleRejected: If a nested selection reaches ``entity_kind`` or any
            kind enclosing it
    """
    _check_cycles(frozenset({entity_kind}), fields)


def _check_cycles(enclosing: frozenset, fields: FieldSelectionSet) -> None:
    for token in fields:
        if not isinstance(token, CompositeField):
            continue
        if token.entity_kind in enclosing:
            raise CycleRejected(token.entity_kind.value)
        _check_cycles(enclosing | {token.entity_kind}, token.selection)


class DocumentCompiler:
    """
    Compiles builders into GraphQL document strings.

    Examples:
        ```python
        builder = ProductQueryBuilder.for_read(Id.product("7343141159089")).with_title()
        DocumentCompiler().compile(builder)
        # 'query { product(id: "gid://shopify/Product/7343141159089") { id,title } }'
        ```
    """

    def compile(self, builder: CompilableBuilder) -> str:
        """
        Compile a builder into a document string.

        Args:
            builder: Product, variant or bulk-operation builder

        Returns:
            GraphQL document text

        Raises:
            CycleRejected: If the selection selects back into its own kind
            BuilderMisuse: If the builder state cannot form a document
        """
        check_cycles(builder.entity_kind, builder.fields)

        operation = builder.operation
        if operation is OperationTag.BULK_OPERATION_RUN_QUERY:
            document = self._render_bulk_run(builder)
        elif operation is OperationTag.CURRENT_BULK_OPERATION:
            document = self._render_current_bulk(builder)
        elif builder.operation_kind is OperationKind.READ:
            document = self._render_read(builder)
        elif builder.operation_kind is OperationKind.CONNECTION:
            document = self._render_connection(builder)
        else:
            document = self._render_update(builder)

        logger.debug("Compiled %s document (%d chars)", operation.value, len(document))
        return document

    def build(self, builder: CompilableBuilder) -> GraphQLDocument:
        """Compile a builder and pair the text with the reply shape it expects."""
        return GraphQLDocument(text=self.compile(builder), operation=builder.operation)

    def _render_read(self, builder: CompilableBuilder) -> str:
        if builder.identifier is None:
            raise BuilderMisuse(builder.operation_kind.value, "compile", "no identifier")
        return (
            f"query {{ {builder.operation.value}(id: {encode_literal(builder.identifier)}) "
            f"{{ {render_fields(builder.fields)} }} }}"
        )

    def _render_connection(self, builder: CompilableBuilder) -> str:
        return f"query {{ {self._connection_selection(builder, with_bounds=True)} }}"

    def _render_update(self, builder: CompilableBuilder) -> str:
        inputs = builder.inputs
        if inputs is None:
            raise BuilderMisuse(builder.operation_kind.value, "compile", "no input assignments")
        assignments = INPUT_SEPARATOR.join(
            f"{key}: {encode_literal(value)}" for key, value in inputs
        )
        payload_field = _PAYLOAD_FIELDS[builder.entity_kind]
        return (
            f"mutation {{ {builder.operation.value}(input: {{ {assignments} }}) "
            f"{{ {payload_field} {{ {render_fields(builder.fields)} }} }} }}"
        )

    def _render_bulk_run(self, builder: Any) -> str:
        inner = builder.inner
        if inner is None or inner.operation_kind is not OperationKind.CONNECTION:
            raise BuilderMisuse("bulk", "run_query", "a connection builder is required")
        check_cycles(inner.entity_kind, inner.fields)
        # Bulk queries page through everything, so first/last is dropped.
        inner_query = "{ " + self._connection_selection(inner, with_bounds=False) + " }"
        block = inner_query.replace('"""', '\\"""')
        return (
            f'mutation {{ {builder.operation.value}(query: """{block}""") '
            f"{{ bulkOperation {{ {render_fields(builder.fields)} }} }} }}"
        )

    def _render_current_bulk(self, builder: CompilableBuilder) -> str:
        return f"query {{ {builder.operation.value} {{ {render_fields(builder.fields)} }} }}"

    def _connection_selection(self, builder: CompilableBuilder, with_bounds: bool) -> str:
        head = builder.operation.value
        if with_bounds:
            if builder.connection is None:
                raise BuilderMisuse(builder.operation_kind.value, "compile", "no connection bounds")
            head = f"{head}({builder.connection.render()})"
        return f"{head} {{ edges {{ node {{ {render_fields(builder.fields)} }} }} }}"


_PAYLOAD_FIELDS = {
    EntityKind.PRODUCT: "product",
    EntityKind.PRODUCT_VARIANT: "productVariant",
}

_default_compiler = DocumentCompiler()


def compile_document(builder: CompilableBuilder) -> str:
    """Compile a builder with the default compiler."""
    return _default_compiler.compile(builder)
