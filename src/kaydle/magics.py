"""
Reserved field identifiers ("magics").

A dataclass field whose wire identifier is one of these strings doesn't match
node content by key. Instead it receives one specific part of the node
directly, and that part is left out of the usual ambiguity checks:

    @dataclass
    class Server:
        name: str = magics.name()
        options: dict[str, int] = magics.properties(default_factory=dict)
        hosts: list[Host] = magics.children(default_factory=list)

There is no escaping: a field renamed to one of these identifiers is always
magic.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Final

ANNOTATION: Final[str] = "$kaydle::annotation"
"""Receives the annotation of the node or value."""

NAME: Final[str] = "$kaydle::name"
"""Receives the name of the node; the type's own identifier isn't checked."""

PROPERTIES: Final[str] = "$kaydle::properties"
"""Receives all properties of the node, as a map or a sequence of pairs."""

ARGUMENTS: Final[str] = "$kaydle::arguments"
"""Receives all arguments of the node, as a sequence."""

CHILDREN: Final[str] = "$kaydle::children"
"""Receives the children of the node, as a map or a sequence."""

TRANSPARENT: Final[str] = "$kaydle::transparent"
"""Receives everything the other magics left over; requires a name field."""

METADATA_KEY: Final[str] = "kaydle"


class FieldRole(Enum):
    """What part of a node a struct field is fed from."""

    PLAIN = "plain"
    PROPERTIES = PROPERTIES
    ARGUMENTS = ARGUMENTS
    CHILDREN = CHILDREN
    ANNOTATION = ANNOTATION
    NAME = NAME
    TRANSPARENT = TRANSPARENT

    @classmethod
    def for_identifier(cls, identifier: str) -> FieldRole:
        """The role of a field with the given wire identifier."""
        try:
            return cls(identifier)
        except ValueError:
            return cls.PLAIN


def rename(key: str, **kwargs: Any) -> Any:
    """A dataclass field whose wire identifier is ``key``.

    Accepts the same keyword arguments as :func:`dataclasses.field`.
    """
    metadata = {**kwargs.pop("metadata", {}), METADATA_KEY: key}
    return dataclasses.field(metadata=metadata, **kwargs)


def identifier_of(field: dataclasses.Field[Any]) -> str:
    """The wire identifier of a dataclass field."""
    return field.metadata.get(METADATA_KEY, field.name)


def annotation(**kwargs: Any) -> Any:
    return rename(ANNOTATION, **kwargs)


def name(**kwargs: Any) -> Any:
    return rename(NAME, **kwargs)


def properties(**kwargs: Any) -> Any:
    return rename(PROPERTIES, **kwargs)


def arguments(**kwargs: Any) -> Any:
    return rename(ARGUMENTS, **kwargs)


def children(**kwargs: Any) -> Any:
    return rename(CHILDREN, **kwargs)


def transparent(**kwargs: Any) -> Any:
    return rename(TRANSPARENT, **kwargs)
