"""
Shape requests: what the target type expects at the current position.

This module defines the runtime description the resolvers dispatch on. A
shape is one variant of a closed tagged union (map, sequence, struct, enum,
option, unit, primitive, ...); resolvers match on it exhaustively rather than
asking the target type to drive them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, dataclass_transform

from kaydle.magics import FieldRole

# =============================================================================
# Shape Base
# =============================================================================


@dataclass_transform(frozen_default=True)
class Shape:
    """Base for shape requests."""

    _tag: ClassVar[str]
    _registry: ClassVar[dict[str, type[Shape]]] = {}

    def __init_subclass__(cls, tag: str | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        dataclass(frozen=True)(cls)

        cls._tag = tag or cls.__name__.lower().removesuffix("shape")

        if existing := Shape._registry.get(cls._tag):
            if existing is not cls:
                raise ValueError(
                    f"Tag '{cls._tag}' already registered to {existing}. "
                    f"Choose a different tag."
                )

        Shape._registry[cls._tag] = cls

    @property
    def kind(self) -> str:
        """Short name of this shape, used in error messages."""
        return self._tag


# =============================================================================
# Scalar Shapes
# =============================================================================


class PrimitiveShape(Shape, tag="primitive"):
    """
    A single scalar: bool, int, float or str.

    Example: int → PrimitiveShape(primitive=int)
    """

    primitive: type

    @property
    def kind(self) -> str:
        return self.primitive.__name__


class UnitShape(Shape, tag="unit"):
    """No content at all. Example: None → UnitShape()"""


class OptionShape(Shape, tag="option"):
    """
    A value that may be missing.

    Example: int | None → OptionShape(inner=PrimitiveShape(int))
    """

    inner: Shape


class AnyShape(Shape, tag="any"):
    """Unrestricted: whatever the content naturally is."""


class IgnoredShape(Shape, tag="ignored"):
    """Accept anything and discard it."""


# =============================================================================
# Collection Shapes
# =============================================================================


class SeqShape(Shape, tag="seq"):
    """
    Homogeneous sequence of any length.

    Example: list[int] → SeqShape(element=PrimitiveShape(int), container=list)
    """

    element: Shape
    container: type = list


class TupleShape(Shape, tag="tuple"):
    """
    Fixed-length heterogeneous sequence.

    Example: tuple[str, int] → TupleShape(elements=(PrimitiveShape(str), PrimitiveShape(int)))
    """

    elements: tuple[Shape, ...]


class MapShape(Shape, tag="map"):
    """
    Key/value mapping; later duplicates replace earlier ones.

    Example: dict[str, int] → MapShape(key=PrimitiveShape(str), value=PrimitiveShape(int))
    """

    key: Shape
    value: Shape


# =============================================================================
# Named Shapes
# =============================================================================


@dataclass(frozen=True)
class FieldShape:
    """
    One declared field of a struct.

    ``name`` is the Python attribute, ``key`` the identifier matched against
    property keys and child node names. ``role`` is PLAIN unless the key is
    one of the reserved magic identifiers.
    """

    name: str
    key: str
    shape: Shape
    role: FieldRole = FieldRole.PLAIN
    required: bool = True


class StructShape(Shape, tag="struct"):
    """
    Named fields, matched by key.

    ``build`` receives the resolved fields as keyword arguments.
    """

    name: str
    fields: tuple[FieldShape, ...]
    build: Callable[..., Any]
    allow_unknown: bool = False

    def field_for_role(self, role: FieldRole) -> FieldShape | None:
        for field in self.fields:
            if field.role is role:
                return field
        return None

    @property
    def plain_fields(self) -> tuple[FieldShape, ...]:
        return tuple(f for f in self.fields if f.role is FieldRole.PLAIN)

    @property
    def has_magics(self) -> bool:
        return any(f.role is not FieldRole.PLAIN for f in self.fields)


class TupleStructShape(Shape, tag="tuplestruct"):
    """Named fields, matched by position. ``build`` receives them positionally."""

    name: str
    elements: tuple[Shape, ...]
    build: Callable[..., Any]


class NewtypeShape(Shape, tag="newtype"):
    """A named wrapper around exactly one inner shape."""

    name: str
    inner: Shape
    build: Callable[[Any], Any]


class UnitStructShape(Shape, tag="unitstruct"):
    """A named type without fields."""

    name: str
    build: Callable[[], Any]


@dataclass(frozen=True)
class Variant:
    """
    One alternative of an enum.

    ``payload`` is None for unit variants, which resolve to ``value``. For
    other variants the payload shape constructs the final value itself.
    """

    name: str
    payload: Shape | None = None
    value: Any = None

    @property
    def is_unit(self) -> bool:
        return self.payload is None or isinstance(self.payload, UnitStructShape)


class EnumShape(Shape, tag="enum"):
    """
    One of several variants, selected by identifier.

    Example: Circle | Rect → EnumShape(name="Circle | Rect", variants=(...))
    """

    name: str
    variants: tuple[Variant, ...]

    def variant(self, identifier: str) -> Variant | None:
        for variant in self.variants:
            if variant.name == identifier:
                return variant
        return None

    @property
    def variant_names(self) -> tuple[str, ...]:
        return tuple(v.name for v in self.variants)


class RefShape(Shape, tag="ref"):
    """
    Reference to the shape of a class or type alias that is still being reflected.

    Used to break cycles in self-referential types; resolved lazily through
    the schema cache.
    """

    target: Any
