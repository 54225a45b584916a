"""
Error taxonomy for schema reflection and node resolution.

Every resolution failure is fatal for the enclosing document: resolvers never
recover from an error, they only annotate it with the path of the node or
value being resolved while it propagates outwards.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kaydle.document import Location


class KaydleError(Exception):
    """Base for all kaydle errors."""


class SchemaError(KaydleError, ValueError):
    """A Python type can't be described as a shape request."""


# =============================================================================
# Resolution Errors
# =============================================================================


class DeserializeError(KaydleError):
    """A node, node list or value couldn't be resolved into the requested shape."""

    def __init__(self, message: str, *, location: Location | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location
        self.path: list[str] = []

    def __str__(self) -> str:
        text = self.message
        if self.path:
            text = f"{'/'.join(self.path)}: {text}"
        if self.location is not None:
            text = f"{text} (line {self.location.line}, column {self.location.column})"
        return text


class UnsupportedShape(DeserializeError):
    """A node list or node was asked for a shape it can never produce."""


class TypeHintRequired(DeserializeError):
    """An unrestricted shape was requested for a node."""


class NodeNameMismatch(DeserializeError):
    """A named node's name differs from the identifier of the requested type."""

    def __init__(
        self,
        node_name: str,
        type_name: str,
        *,
        location: Location | None = None,
    ) -> None:
        super().__init__(
            f"attempted to deserialize a type called {type_name!r} "
            f"from a node called {node_name!r}",
            location=location,
        )
        self.node_name = node_name
        self.type_name = type_name


class AnonymousNodeNameMismatch(DeserializeError):
    """A node resolved into an unnamed shape isn't called '-'."""

    def __init__(self, node_name: str, *, location: Location | None = None) -> None:
        super().__init__(
            f"node {node_name!r} can only be deserialized into a named type; "
            "use '-' as the node name for anonymous content",
            location=location,
        )
        self.node_name = node_name


class UnknownVariant(DeserializeError):
    """No enum variant matches the selector."""

    def __init__(
        self,
        variant: str,
        expected: tuple[str, ...],
        *,
        location: Location | None = None,
    ) -> None:
        super().__init__(
            f"unknown variant {variant!r}, expected one of {', '.join(map(repr, expected))}",
            location=location,
        )
        self.variant = variant
        self.expected = expected


class MissingVariantSelector(DeserializeError):
    """An enum was requested from a node without arguments."""


class AmbiguousNode(DeserializeError):
    """More than one of arguments, properties and children can feed the shape."""


class UnexpectedArguments(DeserializeError):
    """The node has arguments but the shape forbids them."""


class UnexpectedProperties(DeserializeError):
    """The node has properties but the shape forbids them."""


class UnexpectedData(DeserializeError):
    """The node has content but a unit shape was requested."""


class UnexpectedField(DeserializeError):
    """A key or child name isn't a field of the requested struct."""

    def __init__(
        self,
        field: str,
        type_name: str,
        *,
        location: Location | None = None,
    ) -> None:
        super().__init__(
            f"unexpected field {field!r} for type {type_name!r}",
            location=location,
        )
        self.field = field
        self.type_name = type_name


class DuplicateField(DeserializeError):
    """The same struct field is set twice."""

    def __init__(
        self,
        field: str,
        type_name: str,
        *,
        location: Location | None = None,
    ) -> None:
        super().__init__(
            f"duplicate field {field!r} for type {type_name!r}",
            location=location,
        )
        self.field = field
        self.type_name = type_name


class MissingField(DeserializeError):
    """A required struct field received no data."""

    def __init__(
        self,
        field: str,
        type_name: str,
        *,
        location: Location | None = None,
    ) -> None:
        super().__init__(
            f"missing field {field!r} for type {type_name!r}",
            location=location,
        )
        self.field = field
        self.type_name = type_name


class ArityMismatch(DeserializeError):
    """The number of values doesn't match what the shape consumes."""


class RecursionLimitExceeded(DeserializeError):
    """The document nests deeper than the configured limit."""


# =============================================================================
# Conversion Errors
# =============================================================================


class ConversionError(DeserializeError):
    """A scalar couldn't be converted into the requested primitive."""

    def __init__(
        self,
        message: str,
        literal: str,
        *,
        location: Location | None = None,
    ) -> None:
        super().__init__(message, location=location)
        self.literal = literal


class InvalidType(ConversionError):
    """The value's kind isn't accepted by the requested shape."""


class NumberOutOfRange(ConversionError):
    """A numeric literal doesn't fit the representation it was classified as."""
