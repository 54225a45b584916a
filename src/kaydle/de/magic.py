"""
Magic extractor.

Fills the reserved fields of a struct directly from the parts of a node they
name, and hands back the node without those parts so the ordinary struct
rules never see them.
"""

from __future__ import annotations

from dataclasses import replace
from functools import partial
from typing import Any

from kaydle.de import anonymous, nodelist
from kaydle.de.context import Context
from kaydle.de.identifier import resolve_annotation, resolve_identifier
from kaydle.de.value import resolve_value
from kaydle.document import AnonymousNode, Location, Node, Property, Value
from kaydle.errors import ArityMismatch, UnsupportedShape
from kaydle.logging import get_logger
from kaydle.magics import FieldRole
from kaydle.schema import extract_shape
from kaydle.shapes import (
    AnyShape,
    IgnoredShape,
    MapShape,
    OptionShape,
    RefShape,
    SeqShape,
    Shape,
    StructShape,
    TupleShape,
    TupleStructShape,
)

logger = get_logger(__name__)


def extract_magics(
    ctx: Context,
    node: AnonymousNode,
    shape: StructShape,
    name: str | None = None,
) -> tuple[dict[str, Any], AnonymousNode]:
    """
    Resolve the magic fields of ``shape`` from ``node``.

    Returns the resolved fields, keyed by attribute name, and what is left of
    the node. ``name`` is the node name when the node was reached by name;
    without it the name field is left for the usual missing-field handling.
    The transparent field is left to the caller, since it receives the
    remainder.
    """
    values: dict[str, Any] = {}
    remaining = node

    for field in shape.fields:
        if field.role in (FieldRole.PLAIN, FieldRole.TRANSPARENT):
            continue
        with ctx.enter(field.key, node.location):
            match field.role:
                case FieldRole.PROPERTIES:
                    values[field.name] = resolve_properties(
                        ctx, node.properties, field.shape, node.location
                    )
                    remaining = replace(remaining, properties=())
                case FieldRole.ARGUMENTS:
                    values[field.name] = resolve_arguments(
                        ctx, node.arguments, field.shape, node.location
                    )
                    remaining = replace(remaining, arguments=())
                case FieldRole.CHILDREN:
                    values[field.name] = resolve_children(ctx, node.children, field.shape)
                    remaining = replace(remaining, children=None)
                case FieldRole.ANNOTATION:
                    values[field.name] = resolve_annotation(
                        node.annotation, field.shape, node.location
                    )
                case FieldRole.NAME if name is not None:
                    values[field.name] = resolve_identifier(name, field.shape, node.location)

    logger.trace("%s: magic fields %s resolved", shape.name, ", ".join(values))
    return values, remaining


# =============================================================================
# Node Parts
# =============================================================================


def resolve_properties(
    ctx: Context,
    properties: tuple[Property, ...],
    shape: Shape,
    location: Location | None = None,
) -> Any:
    """
    Resolve properties as a map, a struct, or a sequence of ``(key, value)`` pairs.

    Maps keep the last of duplicated keys, structs reject them, and pair
    sequences keep every property in order.
    """
    match shape:
        case RefShape(target=target):
            return resolve_properties(ctx, properties, extract_shape(target), location)
        case IgnoredShape():
            return None
        case OptionShape(inner=inner):
            return resolve_properties(ctx, properties, inner, location) if properties else None
        case MapShape(key=key_shape, value=value_shape):
            result: dict[Any, Any] = {}
            for prop in properties:
                with ctx.enter(prop.key, prop.value.location):
                    key = resolve_identifier(prop.key, key_shape, prop.value.location)
                    result[key] = resolve_value(ctx, prop.value, value_shape)
            return result
        case StructShape():
            entries = ((prop.key, partial(resolve_value, ctx, prop.value)) for prop in properties)
            return anonymous.build_struct(ctx, shape, entries, {}, location)
        case SeqShape(element=element, container=container):
            return container(
                _resolve_pair(ctx, prop, element, location) for prop in properties
            )
        case _:
            msg = f"can't deserialize properties into {shape.kind}"
            raise UnsupportedShape(msg, location=location)


def _resolve_pair(
    ctx: Context,
    prop: Property,
    shape: Shape,
    location: Location | None,
) -> Any:
    with ctx.enter(prop.key, prop.value.location):
        match shape:
            case RefShape(target=target):
                return _resolve_pair(ctx, prop, extract_shape(target), location)
            case TupleShape(elements=(key_shape, value_shape)):
                return (
                    resolve_identifier(prop.key, key_shape, prop.value.location),
                    resolve_value(ctx, prop.value, value_shape),
                )
            case AnyShape():
                return (prop.key, resolve_value(ctx, prop.value, shape))
            case _:
                msg = f"can't deserialize a property into {shape.kind}, expected a pair"
                raise UnsupportedShape(msg, location=location)


def resolve_arguments(
    ctx: Context,
    arguments: tuple[Value, ...],
    shape: Shape,
    location: Location | None = None,
) -> Any:
    """Resolve arguments, in order, as a sequence, tuple or tuple struct."""
    match shape:
        case RefShape(target=target):
            return resolve_arguments(ctx, arguments, extract_shape(target), location)
        case IgnoredShape():
            return None
        case OptionShape(inner=inner):
            return resolve_arguments(ctx, arguments, inner, location) if arguments else None
        case SeqShape(element=element, container=container):
            return container(_elements(ctx, arguments, (element,) * len(arguments)))
        case TupleShape(elements=elements):
            _check_arity(len(arguments), len(elements), "arguments", location)
            return tuple(_elements(ctx, arguments, elements))
        case TupleStructShape(elements=elements, build=build):
            _check_arity(len(arguments), len(elements), "arguments", location)
            return build(*_elements(ctx, arguments, elements))
        case _:
            msg = f"can't deserialize arguments into {shape.kind}"
            raise UnsupportedShape(msg, location=location)


def _elements(
    ctx: Context,
    arguments: tuple[Value, ...],
    shapes: tuple[Shape, ...],
) -> list[Any]:
    result = []
    for index, (argument, shape) in enumerate(zip(arguments, shapes, strict=True)):
        with ctx.enter(f"#{index}", argument.location):
            result.append(resolve_value(ctx, argument, shape))
    return result


def resolve_children(
    ctx: Context,
    children: tuple[Node, ...] | None,
    shape: Shape,
) -> Any:
    """Resolve a children block; a missing block counts as an empty one."""
    nodes = children or ()
    match shape:
        case RefShape(target=target):
            return resolve_children(ctx, children, extract_shape(target))
        case OptionShape(inner=inner):
            return nodelist.resolve_nodelist(ctx, nodes, inner) if nodes else None
        case _:
            return nodelist.resolve_nodelist(ctx, nodes, shape)


def _check_arity(
    actual: int,
    expected: int,
    what: str,
    location: Location | None,
) -> None:
    if actual != expected:
        msg = f"expected {expected} {what}, got {actual}"
        raise ArityMismatch(msg, location=location)
