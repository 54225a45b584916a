"""
Anonymous node resolver.

Decides which parts of a nameless node (arguments, properties, children)
may feed the requested shape, and rejects the combinations that can't be
assigned unambiguously. Magic fields are extracted first; what they consume
is invisible to every rule below.

    Shape           Legal content                   Rejected with
    --------------  ------------------------------  ---------------------------------------
    struct          properties xor children         AmbiguousNode, UnexpectedArguments
    map             properties xor children         AmbiguousNode, UnexpectedArguments
    seq / tuple     arguments xor children          AmbiguousNode, UnexpectedProperties
    enum            selector argument, then payload MissingVariantSelector, UnknownVariant
    unit            nothing at all                  UnexpectedData
    option          nothing, or a single null       (resolves the inner shape otherwise)
    primitive       exactly one argument            ArityMismatch
    ignored         anything                        -
    any             -                               TypeHintRequired

A children block is present as soon as the node has braces, even if they are
empty; only the children magic treats a missing and an empty block alike.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from functools import partial
from typing import Any

from kaydle.de import magic, nodelist
from kaydle.de.context import Context
from kaydle.de.value import resolve_value
from kaydle.document import AnonymousNode, Location, ValueKind
from kaydle.errors import (
    AmbiguousNode,
    ArityMismatch,
    DuplicateField,
    MissingField,
    MissingVariantSelector,
    TypeHintRequired,
    UnexpectedArguments,
    UnexpectedData,
    UnexpectedField,
    UnexpectedProperties,
    UnknownVariant,
    UnsupportedShape,
)
from kaydle.logging import get_logger
from kaydle.magics import FieldRole
from kaydle.schema import extract_shape
from kaydle.shapes import (
    AnyShape,
    EnumShape,
    IgnoredShape,
    MapShape,
    NewtypeShape,
    OptionShape,
    PrimitiveShape,
    RefShape,
    SeqShape,
    Shape,
    StructShape,
    TupleShape,
    TupleStructShape,
    UnitShape,
    UnitStructShape,
    Variant,
)

logger = get_logger(__name__)

type Entry = tuple[str, Callable[[Shape], Any]]


def resolve_anonymous(
    ctx: Context,
    node: AnonymousNode,
    shape: Shape,
    name: str | None = None,
) -> Any:
    """
    Resolve the content of a node into ``shape``.

    ``name`` is only passed when the node was reached by name and the shape
    wants it through a name field.
    """
    match shape:
        case RefShape(target=target):
            return resolve_anonymous(ctx, node, extract_shape(target), name)
        case IgnoredShape():
            return None
        case AnyShape():
            msg = "can't deserialize a node without a type hint"
            raise TypeHintRequired(msg, location=node.location)
        case StructShape() if shape.has_magics:
            return _resolve_magic_struct(ctx, node, shape, name)
        case StructShape():
            return _resolve_struct(ctx, node, shape, {})
        case MapShape():
            return _resolve_map(ctx, node, shape)
        case SeqShape() | TupleShape() | TupleStructShape():
            return _resolve_seq(ctx, node, shape)
        case EnumShape():
            return _resolve_enum(ctx, node, shape)
        case UnitShape():
            _expect_empty(node, shape)
            return None
        case UnitStructShape(build=build):
            _expect_empty(node, shape)
            return build()
        case OptionShape(inner=inner):
            if node.is_empty or _is_single_null(node):
                return None
            return resolve_anonymous(ctx, node, inner, name)
        case NewtypeShape(inner=inner, build=build):
            return build(resolve_anonymous(ctx, node, inner, name))
        case PrimitiveShape():
            return _resolve_primitive(ctx, node, shape)
        case _:
            msg = f"can't deserialize {shape.kind} from a node"
            raise UnsupportedShape(msg, location=node.location)


def resolve_variant(ctx: Context, node: AnonymousNode, variant: Variant) -> Any:
    """Resolve the payload of an already selected variant."""
    if variant.payload is None:
        _expect_empty(node, UnitShape())
        return variant.value
    return resolve_anonymous(ctx, node, variant.payload)


# =============================================================================
# Structs
# =============================================================================


def _resolve_magic_struct(
    ctx: Context,
    node: AnonymousNode,
    shape: StructShape,
    name: str | None,
) -> Any:
    values, remaining = magic.extract_magics(ctx, node, shape, name)

    transparent = shape.field_for_role(FieldRole.TRANSPARENT)
    if transparent is None:
        return _resolve_struct(ctx, remaining, shape, values)

    if shape.plain_fields:
        raise UnexpectedField(shape.plain_fields[0].key, shape.name, location=node.location)
    with ctx.enter(transparent.key, node.location):
        values[transparent.name] = resolve_anonymous(ctx, remaining, transparent.shape)
    return build_struct(ctx, shape, (), values, node.location)


def _resolve_struct(
    ctx: Context,
    node: AnonymousNode,
    shape: StructShape,
    preset: dict[str, Any],
) -> Any:
    if node.arguments:
        msg = f"{shape.name} has no positional fields, got {len(node.arguments)} arguments"
        raise UnexpectedArguments(msg, location=node.location)
    if node.properties and node.children is not None:
        msg = f"{shape.name} can be read from properties or children, but the node has both"
        raise AmbiguousNode(msg, location=node.location)

    entries: Iterable[Entry]
    if node.children is not None:
        entries = (
            (child.name, partial(resolve_anonymous, ctx, child.anonymous()))
            for child in node.children
        )
    else:
        entries = ((prop.key, partial(resolve_value, ctx, prop.value)) for prop in node.properties)
    return build_struct(ctx, shape, entries, preset, node.location)


def build_struct(
    ctx: Context,
    shape: StructShape,
    entries: Iterable[Entry],
    preset: dict[str, Any],
    location: Location | None = None,
) -> Any:
    """
    Match keyed entries against the plain fields of ``shape`` and build it.

    Each entry pairs a key with a callable resolving the entry into a field
    shape. Unknown keys are errors unless the struct allows them; fields that
    receive nothing fall back to None for options, then to their default.
    """
    by_key = {field.key: field for field in shape.plain_fields}
    values = dict(preset)
    seen: set[str] = set()

    for key, resolve in entries:
        field = by_key.get(key)
        if field is None:
            if shape.allow_unknown:
                continue
            raise UnexpectedField(key, shape.name, location=location)
        if key in seen:
            raise DuplicateField(key, shape.name, location=location)
        seen.add(key)
        with ctx.enter(key, location):
            values[field.name] = resolve(field.shape)

    for field in shape.fields:
        if field.name in values or not field.required:
            continue
        if isinstance(field.shape, OptionShape):
            values[field.name] = None
        else:
            raise MissingField(field.key, shape.name, location=location)

    return shape.build(**values)


# =============================================================================
# Collections
# =============================================================================


def _resolve_map(ctx: Context, node: AnonymousNode, shape: MapShape) -> Any:
    if node.arguments:
        msg = f"a map can't hold arguments, got {len(node.arguments)}"
        raise UnexpectedArguments(msg, location=node.location)
    if node.properties and node.children is not None:
        msg = "a map can be read from properties or children, but the node has both"
        raise AmbiguousNode(msg, location=node.location)

    if node.children is not None:
        return nodelist.resolve_nodelist(ctx, node.children, shape)
    return magic.resolve_properties(ctx, node.properties, shape, node.location)


def _resolve_seq(
    ctx: Context,
    node: AnonymousNode,
    shape: SeqShape | TupleShape | TupleStructShape,
) -> Any:
    if node.properties:
        msg = f"a {shape.kind} can't hold properties, got {len(node.properties)}"
        raise UnexpectedProperties(msg, location=node.location)
    if node.arguments and node.children is not None:
        msg = f"a {shape.kind} can be read from arguments or children, but the node has both"
        raise AmbiguousNode(msg, location=node.location)

    if node.children is not None:
        return nodelist.resolve_nodelist(ctx, node.children, shape)
    return magic.resolve_arguments(ctx, node.arguments, shape, node.location)


# =============================================================================
# Enums and Scalars
# =============================================================================


def _resolve_enum(ctx: Context, node: AnonymousNode, shape: EnumShape) -> Any:
    """The first argument names the variant; the rest of the node is its payload."""
    if not node.arguments:
        msg = f"{shape.name} needs an argument naming the variant"
        raise MissingVariantSelector(msg, location=node.location)

    selector, *rest = node.arguments
    variant = shape.variant(selector.literal) if selector.kind is ValueKind.STRING else None
    if variant is None:
        raise UnknownVariant(selector.literal, shape.variant_names, location=node.location)

    logger.trace("%s: variant %s selected by argument", shape.name, variant.name)
    return resolve_variant(ctx, replace(node, arguments=tuple(rest)), variant)


def _resolve_primitive(ctx: Context, node: AnonymousNode, shape: PrimitiveShape) -> Any:
    if len(node.arguments) != 1 or node.properties or node.children is not None:
        msg = (
            f"a {shape.kind} needs exactly one argument and nothing else, got "
            f"{len(node.arguments)} arguments, {len(node.properties)} properties"
            f"{' and children' if node.children is not None else ''}"
        )
        raise ArityMismatch(msg, location=node.location)

    (argument,) = node.arguments
    return resolve_value(ctx, argument, shape)


def _expect_empty(node: AnonymousNode, shape: Shape) -> None:
    if not node.is_empty:
        msg = f"expected {shape.kind} with no content, but the node has data"
        raise UnexpectedData(msg, location=node.location)


def _is_single_null(node: AnonymousNode) -> bool:
    return (
        len(node.arguments) == 1
        and node.arguments[0].is_null
        and not node.properties
        and node.children is None
    )
