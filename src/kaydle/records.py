"""
Record base class for deserialization targets.

A Record is a frozen dataclass that carries the identifier a named node must
use to select it (its tag), the form its content takes, and whether it
tolerates keys it doesn't declare.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, dataclass_transform

type RecordForm = Literal["struct", "tuple", "newtype"]

# =============================================================================
# Core Types
# =============================================================================


class IgnoredAny:
    """Annotation for content that is accepted and thrown away."""


@dataclass_transform(frozen_default=True)
class Record:
    """
    Base for deserialization targets.

    Class keywords:
        tag: Identifier a named node must carry; defaults to the lowercased
            class name.
        form: ``"struct"`` (fields by key), ``"tuple"`` (fields by position)
            or ``"newtype"`` (a single field standing for the whole node).
        allow_unknown: Ignore properties and children that match no field.

    Example:
        class Circle(Record, form="tuple"):
            radius: float

        class Rect(Record):
            width: float
            height: float
    """

    _tag: ClassVar[str]
    _form: ClassVar[RecordForm]
    _allow_unknown: ClassVar[bool]

    def __init_subclass__(
        cls,
        tag: str | None = None,
        form: RecordForm = "struct",
        allow_unknown: bool = False,
        frozen: bool = True,
        **kwargs,
    ):
        super().__init_subclass__(**kwargs)
        dataclass(frozen=frozen, eq=True, repr=True)(cls)
        cls._tag = tag or cls.__name__.lower()
        cls._form = form
        cls._allow_unknown = allow_unknown
