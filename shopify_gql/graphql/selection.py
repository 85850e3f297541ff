"""
Field selections and input assignments.

A :class:`FieldSelectionSet` is an insertion-ordered, duplicate-free sequence
of field tokens. A token is either a plain scalar field or a
:class:`CompositeField` that embeds another selection (for example a
product's ``variants`` connection). An :class:`InputAssignmentSet` holds the
``key: value`` pairs of a mutation's ``input:`` argument.

Both are immutable: every ``add`` returns a new set, so a builder value can be
shared freely and is never changed behind the caller's back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterator, Optional, Tuple, Union

from ..exceptions import InvalidConnection
from .models import EntityKind


@dataclass(frozen=True, init=False)
class Connection:
    """
    Bounds of a list request: exactly one of ``first`` or ``last``.

    Examples:
        ```python
        Connection.first(10)
        Connection(last=5)
        ```
    """

    first_count: Optional[int]
    last_count: Optional[int]

    def __init__(self, first: Optional[int] = None, last: Optional[int] = None):
        if (first is None) == (last is None):
            raise InvalidConnection(first, last)
        count = first if first is not None else last
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidConnection(first, last)
        object.__setattr__(self, "first_count", first)
        object.__setattr__(self, "last_count", last)

    @classmethod
    def first(cls, count: int) -> Connection:
        return cls(first=count)

    @classmethod
    def last(cls, count: int) -> Connection:
        return cls(last=count)

    @property
    def argument(self) -> Tuple[str, int]:
        """The single ``(name, count)`` argument to render."""
        if self.first_count is not None:
            return ("first", self.first_count)
        return ("last", self.last_count)  # type: ignore[return-value]

    def render(self) -> str:
        name, count = self.argument
        return f"{name}: {count}"


@dataclass(frozen=True)
class ScalarField:
    """A leaf field such as ``title``."""

    name: str

    @property
    def reachable_kinds(self) -> FrozenSet[EntityKind]:
        return frozenset()


@dataclass(frozen=True)
class CompositeField:
    """
    A nested field whose body is another selection.

    Attributes:
        name: Field name in the parent entity
        entity_kind: Kind of the embedded entity
        selection: Fields selected on the embedded entity
        connection: Set when the field is a paginated list
    """

    name: str
    entity_kind: EntityKind
    selection: FieldSelectionSet
    connection: Optional[Connection] = None

    @property
    def reachable_kinds(self) -> FrozenSet[EntityKind]:
        """Every entity kind selected at or below this field."""
        return frozenset({self.entity_kind}) | self.selection.reachable_kinds


FieldToken = Union[ScalarField, CompositeField]


@dataclass(frozen=True)
class FieldSelectionSet:
    """Ordered set of field tokens."""

    tokens: Tuple[FieldToken, ...] = ()

    @classmethod
    def of(cls, *names: str) -> FieldSelectionSet:
        selection = cls()
        for name in names:
            selection = selection.add(ScalarField(name))
        return selection

    def add(self, token: FieldToken) -> FieldSelectionSet:
        """
        Add a token, keeping first-insertion order.

        Adding a token that is already present returns the set unchanged.
        """
        if token in self.tokens:
            return self
        return FieldSelectionSet(self.tokens + (token,))

    def find(self, name: str) -> Optional[FieldToken]:
        """Get the token selecting field ``name``, if any."""
        for token in self.tokens:
            if token.name == name:
                return token
        return None

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(token.name for token in self.tokens)

    @property
    def reachable_kinds(self) -> FrozenSet[EntityKind]:
        kinds: FrozenSet[EntityKind] = frozenset()
        for token in self.tokens:
            kinds |= token.reachable_kinds
        return kinds

    def __contains__(self, name: object) -> bool:
        return any(token.name == name for token in self.tokens)

    def __iter__(self) -> Iterator[FieldToken]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class InputAssignmentSet:
    """
    Ordered ``key: value`` assignments of a mutation input.

    Assigning a key a second time replaces its value in place, so the
    rendered input never carries duplicate keys.
    """

    assignments: Tuple[Tuple[str, Any], ...] = ()

    def assign(self, key: str, value: Any) -> InputAssignmentSet:
        for index, (existing, _) in enumerate(self.assignments):
            if existing == key:
                updated = list(self.assignments)
                updated[index] = (key, value)
                return InputAssignmentSet(tuple(updated))
        return InputAssignmentSet(self.assignments + ((key, value),))

    def get(self, key: str, default: Any = None) -> Any:
        for existing, value in self.assignments:
            if existing == key:
                return value
        return default

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.assignments)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.assignments)

    def __len__(self) -> int:
        return len(self.assignments)
