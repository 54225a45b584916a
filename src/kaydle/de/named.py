"""
Named node resolver.

A named node has to use its name somehow: as the enum variant, as the
identifier of the requested type, as the value of a name field, or by being
the anonymous placeholder ``-``.
"""

from __future__ import annotations

from typing import Any, Final

from kaydle.de import anonymous
from kaydle.de.context import Context
from kaydle.document import Node
from kaydle.errors import (
    AnonymousNodeNameMismatch,
    NodeNameMismatch,
    TypeHintRequired,
    UnknownVariant,
)
from kaydle.logging import get_logger
from kaydle.magics import FieldRole
from kaydle.schema import extract_shape
from kaydle.shapes import (
    AnyShape,
    EnumShape,
    IgnoredShape,
    NewtypeShape,
    RefShape,
    Shape,
    StructShape,
    TupleStructShape,
    UnitStructShape,
)

logger = get_logger(__name__)

PLACEHOLDER: Final[str] = "-"


def resolve_named(ctx: Context, node: Node, shape: Shape) -> Any:
    """Resolve ``node``, name included, into ``shape``."""
    match shape:
        case RefShape(target=target):
            return resolve_named(ctx, node, extract_shape(target))
        case IgnoredShape():
            return None
        case AnyShape():
            msg = f"can't deserialize node {node.name!r} without a type hint"
            raise TypeHintRequired(msg, location=node.location)
        case EnumShape():
            variant = shape.variant(node.name)
            if variant is None:
                raise UnknownVariant(node.name, shape.variant_names, location=node.location)
            logger.trace("%s: variant %s selected by node name", shape.name, variant.name)
            return anonymous.resolve_variant(ctx, node.anonymous(), variant)
        case StructShape() if shape.field_for_role(FieldRole.NAME) is not None:
            return anonymous.resolve_anonymous(ctx, node.anonymous(), shape, name=node.name)
        case StructShape() | TupleStructShape() | NewtypeShape() | UnitStructShape():
            if node.name != shape.name:
                raise NodeNameMismatch(node.name, shape.name, location=node.location)
            return anonymous.resolve_anonymous(ctx, node.anonymous(), shape)
        case _:
            if node.name != PLACEHOLDER:
                raise AnonymousNodeNameMismatch(node.name, location=node.location)
            return anonymous.resolve_anonymous(ctx, node.anonymous(), shape)
