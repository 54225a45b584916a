"""
Value resolver: a single KDL scalar into a requested shape.

Apart from options, annotated pairs, enums and newtypes, the requested shape
is only used to check the result; conversion dispatches on the value's own
kind.
"""

from __future__ import annotations

from typing import Any

from kaydle.de.context import Context
from kaydle.de.identifier import resolve_annotation, unit_variant
from kaydle.document import Value, ValueKind
from kaydle.errors import InvalidType, UnknownVariant
from kaydle.magics import FieldRole
from kaydle.numbers import NumberKind
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
    StructShape,
    UnitShape,
    UnitStructShape,
)


def resolve_value(ctx: Context, value: Value, shape: Shape) -> Any:
    """Resolve ``value`` into ``shape``."""
    match shape:
        case RefShape(target=target):
            return resolve_value(ctx, value, extract_shape(target))
        case IgnoredShape():
            return None
        case OptionShape(inner=inner):
            return None if value.is_null else resolve_value(ctx, value, inner)
        case NewtypeShape(inner=inner, build=build):
            return build(resolve_value(ctx, value, inner))
        case StructShape() if _is_annotated_pair(shape):
            return _resolve_annotated_pair(ctx, value, shape)
        case EnumShape():
            return _resolve_enum(ctx, value, shape)
        case _:
            return _resolve_scalar(ctx, value, shape)


def _is_annotated_pair(shape: StructShape) -> bool:
    roles = [field.role for field in shape.fields]
    return len(roles) == 2 and roles.count(FieldRole.ANNOTATION) == 1 and FieldRole.PLAIN in roles


def _resolve_annotated_pair(ctx: Context, value: Value, shape: StructShape) -> Any:
    """Split an annotated value into its annotation field and its value field."""
    annotation_field = shape.field_for_role(FieldRole.ANNOTATION)
    (value_field,) = shape.plain_fields
    assert annotation_field is not None
    return shape.build(
        **{
            annotation_field.name: resolve_annotation(
                value.annotation, annotation_field.shape, value.location
            ),
            value_field.name: resolve_value(ctx, value.unannotated(), value_field.shape),
        }
    )


def _resolve_enum(ctx: Context, value: Value, shape: EnumShape) -> Any:
    """
    Select a variant from a value.

    An annotation selects a newtype variant carrying the unannotated value;
    a plain string selects a unit variant.
    """
    if value.annotation is not None:
        variant = shape.variant(value.annotation)
        if variant is None:
            raise UnknownVariant(value.annotation, shape.variant_names, location=value.location)
        if not isinstance(variant.payload, NewtypeShape):
            msg = (
                f"invalid type: annotated value, only newtype variants can be "
                f"selected by an annotation, {variant.name!r} isn't one"
            )
            raise InvalidType(msg, value.literal, location=value.location)
        return resolve_value(ctx, value.unannotated(), variant.payload)

    if value.kind is not ValueKind.STRING:
        msg = f"invalid type: {value.kind.value} {value.literal!r}, expected {shape.kind}"
        raise InvalidType(msg, value.literal, location=value.location)

    variant = shape.variant(value.literal)
    if variant is None:
        raise UnknownVariant(value.literal, shape.variant_names, location=value.location)
    return unit_variant(variant, value.location)


def _resolve_scalar(ctx: Context, value: Value, shape: Shape) -> Any:
    """Convert by the value's own kind, then check the shape accepts it."""
    match value.kind:
        case ValueKind.NULL:
            if isinstance(shape, UnitShape | AnyShape):
                return None
            if isinstance(shape, UnitStructShape):
                return shape.build()
        case ValueKind.BOOL:
            if _accepts(shape, bool):
                return value.literal == "true"
        case ValueKind.STRING:
            if _accepts(shape, str):
                return value.literal
        case ValueKind.NUMBER:
            number = ctx.number(value.literal)
            if number.kind is NumberKind.FLOAT:
                if _accepts(shape, float):
                    return number.value
            elif _accepts(shape, int):
                return number.value
            elif _accepts(shape, float):
                return float(number.value)

    msg = f"invalid type: {value.kind.value} {value.literal!r}, expected {shape.kind}"
    raise InvalidType(msg, value.literal, location=value.location)


def _accepts(shape: Shape, primitive: type) -> bool:
    match shape:
        case AnyShape():
            return True
        case PrimitiveShape(primitive=expected):
            return expected is primitive
        case _:
            return False
