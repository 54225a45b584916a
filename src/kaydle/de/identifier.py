"""Resolution of identifiers: node names, property keys and annotations."""

from __future__ import annotations

from typing import Any

from kaydle.document import Location
from kaydle.errors import InvalidType, UnknownVariant
from kaydle.schema import extract_shape
from kaydle.shapes import (
    AnyShape,
    EnumShape,
    IgnoredShape,
    NewtypeShape,
    OptionShape,
    PrimitiveShape,
    RefShape,
    Shape,
    UnitShape,
    Variant,
)


def resolve_identifier(
    text: str,
    shape: Shape,
    location: Location | None = None,
) -> Any:
    """Resolve an identifier as a string, or as a unit variant named by it."""
    match shape:
        case RefShape(target=target):
            return resolve_identifier(text, extract_shape(target), location)
        case PrimitiveShape(primitive=primitive) if primitive is str:
            return text
        case AnyShape():
            return text
        case IgnoredShape():
            return None
        case OptionShape(inner=inner):
            return resolve_identifier(text, inner, location)
        case NewtypeShape(inner=inner, build=build):
            return build(resolve_identifier(text, inner, location))
        case EnumShape():
            variant = shape.variant(text)
            if variant is None:
                raise UnknownVariant(text, shape.variant_names, location=location)
            return unit_variant(variant, location)
        case _:
            msg = f"invalid type: identifier {text!r}, expected {shape.kind}"
            raise InvalidType(msg, text, location=location)


def resolve_annotation(
    annotation: str | None,
    shape: Shape,
    location: Location | None = None,
) -> Any:
    """Resolve an optional annotation; absent annotations only fit optional shapes."""
    match shape:
        case RefShape(target=target):
            return resolve_annotation(annotation, extract_shape(target), location)
        case IgnoredShape():
            return None
        case OptionShape(inner=inner):
            return None if annotation is None else resolve_identifier(annotation, inner, location)
        case UnitShape() if annotation is None:
            return None
        case _ if annotation is None:
            msg = f"invalid type: missing annotation, expected {shape.kind}"
            raise InvalidType(msg, "", location=location)
        case _:
            return resolve_identifier(annotation, shape, location)


def unit_variant(variant: Variant, location: Location | None = None) -> Any:
    """The value of a unit variant selected without any payload."""
    if not variant.is_unit:
        msg = f"invalid type: unit variant, variant {variant.name!r} carries a payload"
        raise InvalidType(msg, variant.name, location=location)
    if variant.payload is not None:
        return variant.payload.build()
    return variant.value
