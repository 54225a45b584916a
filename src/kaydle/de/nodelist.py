"""
Node list interpreter.

A document or children block is either a sequence of named nodes or a map
from node names to anonymous nodes. Nothing else can be built from it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from kaydle.de import anonymous, named
from kaydle.de.context import Context
from kaydle.de.identifier import resolve_identifier
from kaydle.document import AnonymousNode, Node
from kaydle.errors import ArityMismatch, UnsupportedShape
from kaydle.schema import extract_shape
from kaydle.shapes import (
    IgnoredShape,
    MapShape,
    RefShape,
    SeqShape,
    Shape,
    StructShape,
    TupleShape,
    TupleStructShape,
)


def resolve_nodelist(ctx: Context, nodes: Sequence[Node], shape: Shape) -> Any:
    """Resolve a list of nodes into a map, struct or sequence shape."""
    match shape:
        case RefShape(target=target):
            return resolve_nodelist(ctx, nodes, extract_shape(target))
        case IgnoredShape():
            return None
        case MapShape(key=key_shape, value=value_shape):
            result: dict[Any, Any] = {}
            for node in nodes:
                with ctx.enter(node.name, node.location):
                    key = resolve_identifier(node.name, key_shape, node.location)
                    result[key] = anonymous.resolve_anonymous(ctx, node.anonymous(), value_shape)
            return result
        case StructShape():
            # Same rules as a node holding nothing but these children
            return anonymous.resolve_anonymous(ctx, AnonymousNode(children=tuple(nodes)), shape)
        case SeqShape(element=element, container=container):
            return container(_named_elements(ctx, nodes, (element,) * len(nodes)))
        case TupleShape(elements=elements):
            _check_length(nodes, elements)
            return tuple(_named_elements(ctx, nodes, elements))
        case TupleStructShape(elements=elements, build=build):
            _check_length(nodes, elements)
            return build(*_named_elements(ctx, nodes, elements))
        case _:
            msg = f"can't deserialize {shape.kind} from a node list"
            raise UnsupportedShape(msg)


def _named_elements(
    ctx: Context,
    nodes: Sequence[Node],
    shapes: Sequence[Shape],
) -> list[Any]:
    result = []
    for index, (node, shape) in enumerate(zip(nodes, shapes, strict=True)):
        with ctx.enter(f"{node.name}[{index}]", node.location):
            result.append(named.resolve_named(ctx, node, shape))
    return result


def _check_length(nodes: Sequence[Node], elements: tuple[Shape, ...]) -> None:
    if len(nodes) != len(elements):
        msg = f"expected {len(elements)} nodes, got {len(nodes)}"
        raise ArityMismatch(msg)
