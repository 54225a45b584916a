"""
Node-oriented document model.

This module holds the already-parsed form of a KDL document: an ordered list
of nodes, each carrying ordered arguments, ordered (and possibly duplicated)
properties, and an optional children block. Resolvers only read these
structures; nothing here is mutated after construction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

# =============================================================================
# Scalars
# =============================================================================


@dataclass(frozen=True)
class Location:
    """Position of a node or value in the source text (1-based)."""

    line: int
    column: int


class ValueKind(Enum):
    """Semantic kind of a KDL value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"


@dataclass(frozen=True)
class Value:
    """
    A KDL scalar with an optional annotation.

    ``literal`` is the normalized payload: the decoded text for strings, the
    literal spelling for numbers, and ``"true"``, ``"false"`` or ``"null"``
    for the keywords.

    Example: (u8)10 → Value(ValueKind.NUMBER, "10", annotation="u8")
    """

    kind: ValueKind
    literal: str
    annotation: str | None = None
    location: Location | None = field(default=None, compare=False)

    @classmethod
    def of(cls, raw: Any, annotation: str | None = None) -> Value:
        """Build a value from a Python scalar."""
        if isinstance(raw, Value):
            return raw if annotation is None else replace(raw, annotation=annotation)
        if raw is None:
            return cls(ValueKind.NULL, "null", annotation)
        if isinstance(raw, bool):
            return cls(ValueKind.BOOL, "true" if raw else "false", annotation)
        if isinstance(raw, int | float):
            return cls(ValueKind.NUMBER, repr(raw), annotation)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw, annotation)
        msg = f"Cannot build a KDL value from {type(raw).__name__}"
        raise TypeError(msg)

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def unannotated(self) -> Value:
        """This value without its annotation."""
        return replace(self, annotation=None)


@dataclass(frozen=True)
class Property:
    """A ``key=value`` pair attached to a node."""

    key: str
    value: Value


# =============================================================================
# Nodes
# =============================================================================


@dataclass(frozen=True)
class AnonymousNode:
    """
    A node viewed without its name.

    Anonymous nodes appear when a node list is resolved as a map (the name
    became the key) or when the name was consumed as an enum discriminant.
    ``children`` is ``None`` when the node has no children block at all, and
    an empty tuple for an empty ``{}`` block.
    """

    arguments: tuple[Value, ...] = ()
    properties: tuple[Property, ...] = ()
    children: tuple[Node, ...] | None = None
    annotation: str | None = None
    location: Location | None = field(default=None, compare=False)

    @property
    def is_empty(self) -> bool:
        """True when arguments, properties and children are all absent."""
        return not self.arguments and not self.properties and self.children is None


@dataclass(frozen=True)
class Node:
    """One entry of a node list."""

    name: str
    arguments: tuple[Value, ...] = ()
    properties: tuple[Property, ...] = ()
    children: tuple[Node, ...] | None = None
    annotation: str | None = None
    location: Location | None = field(default=None, compare=False)

    def anonymous(self) -> AnonymousNode:
        """The content of this node, without its name."""
        return AnonymousNode(
            arguments=self.arguments,
            properties=self.properties,
            children=self.children,
            annotation=self.annotation,
            location=self.location,
        )


@dataclass(frozen=True)
class Document:
    """A parsed KDL document: the top-level node list."""

    nodes: tuple[Node, ...] = ()


# =============================================================================
# Builders
# =============================================================================


def value(raw: Any, annotation: str | None = None) -> Value:
    """Shorthand for :meth:`Value.of`."""
    return Value.of(raw, annotation)


def node(
    name: str,
    *arguments: Any,
    props: Mapping[str, Any] | Iterable[tuple[str, Any]] = (),
    children: Iterable[Node] | None = None,
    annotation: str | None = None,
    location: Location | None = None,
) -> Node:
    """
    Build a node from Python values.

    ``props`` may be a mapping or an iterable of pairs; pairs keep duplicate
    keys and their order.

    Example:
        node("server", "alpha", props=[("port", 80)], children=[node("tls", True)])
    """
    pairs = props.items() if isinstance(props, Mapping) else props
    return Node(
        name=name,
        arguments=tuple(Value.of(arg) for arg in arguments),
        properties=tuple(Property(key, Value.of(raw)) for key, raw in pairs),
        children=None if children is None else tuple(children),
        annotation=annotation,
        location=location,
    )


def document(*nodes: Node) -> Document:
    """Build a document from nodes."""
    return Document(nodes=nodes)
