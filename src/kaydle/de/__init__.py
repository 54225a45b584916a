"""
Deserialization entry points.

Each entry point reflects the target type into a shape request once, then
hands the parsed input to the resolver for its level: a document or node
list to the node list interpreter, a single node to the named node
resolver, a single value to the value resolver.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from kaydle.de import named, nodelist
from kaydle.de.context import Context
from kaydle.de.value import resolve_value
from kaydle.document import Document, Node, Value
from kaydle.errors import RecursionLimitExceeded
from kaydle.logging import get_logger
from kaydle.options import DeserializeOptions
from kaydle.schema import extract_shape

logger = get_logger(__name__)


def from_document(
    document: Document,
    target: Any,
    options: DeserializeOptions | None = None,
) -> Any:
    """
    Deserialize a whole document into ``target``.

    Args:
        document: The parsed document
        target: A type hint: a dataclass, Record, dict, list, ...
        options: Deserialization options; when omitted they are read from
            the environment (see ``DeserializeOptions.from_env``)

    Returns:
        An instance of ``target``

    Example:
        >>> from_document(document(node("port", 80)), dict[str, int])
        {'port': 80}
    """
    return from_nodes(document.nodes, target, options)


def from_nodes(
    nodes: Iterable[Node],
    target: Any,
    options: DeserializeOptions | None = None,
) -> Any:
    """Deserialize a node list, such as a children block, into ``target``."""
    nodes = tuple(nodes)
    shape = extract_shape(target)
    logger.debug("deserializing %d nodes into %s", len(nodes), shape.kind)
    with _stack_guard():
        return nodelist.resolve_nodelist(_context(options), nodes, shape)


def from_node(
    node: Node,
    target: Any,
    options: DeserializeOptions | None = None,
) -> Any:
    """Deserialize a single named node into ``target``; the name is checked."""
    shape = extract_shape(target)
    logger.debug("deserializing node %r into %s", node.name, shape.kind)
    with _stack_guard():
        return named.resolve_named(_context(options), node, shape)


def from_value(
    value: Value,
    target: Any,
    options: DeserializeOptions | None = None,
) -> Any:
    """Deserialize a single value into ``target``."""
    shape = extract_shape(target)
    logger.debug("deserializing %s value into %s", value.kind.value, shape.kind)
    with _stack_guard():
        return resolve_value(_context(options), value, shape)


def _context(options: DeserializeOptions | None) -> Context:
    return Context(options=options if options is not None else DeserializeOptions.from_env())


@contextmanager
def _stack_guard() -> Iterator[None]:
    """Report running out of interpreter stack as a nesting failure."""
    try:
        yield
    except RecursionError as err:
        msg = "document nests deeper than the interpreter stack allows; lower max_depth"
        raise RecursionLimitExceeded(msg) from err
