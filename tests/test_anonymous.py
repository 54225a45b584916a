"""Tests for resolving node content (arguments, properties, children)."""

import enum
from dataclasses import dataclass
from typing import Any, NamedTuple

import pytest

from kaydle.de import from_node
from kaydle.document import Location, node
from kaydle.errors import (
    AmbiguousNode,
    ArityMismatch,
    DuplicateField,
    InvalidType,
    MissingField,
    MissingVariantSelector,
    TypeHintRequired,
    UnexpectedArguments,
    UnexpectedData,
    UnexpectedField,
    UnexpectedProperties,
    UnknownVariant,
)
from kaydle.records import IgnoredAny, Record


class Point(Record):
    x: int
    y: int


class Circle(Record, form="tuple"):
    radius: float


class Rect(Record):
    width: float
    height: float


class Meters(Record, form="newtype"):
    amount: float


class Marker(Record):
    pass


class Loose(Record, allow_unknown=True):
    x: int


class Partial(Record):
    x: int
    label: str | None
    scale: float = 1.0


class WithDefault(Record):
    port: int | None = 80
    scale: float | None = 1.0
    label: str | None = None


type Outline = dict[str, Outline] | None


class WithIgnored(Record):
    keep: int
    skip: IgnoredAny


class Color(enum.Enum):
    RED = "r"
    GREEN = "g"


class Span(NamedTuple):
    start: int
    end: int


@dataclass
class Limits:
    low: int
    high: int


class TestStructs:
    """Test structs read from properties or children."""

    def test_from_properties(self):
        """Test fields given as properties."""
        assert from_node(node("point", props={"x": 1, "y": 2}), Point) == Point(1, 2)

    def test_from_children(self):
        """Test fields given as child nodes."""
        n = node("point", children=[node("x", 1), node("y", 2)])
        assert from_node(n, Point) == Point(1, 2)

    def test_properties_and_children_ambiguous(self):
        """Test that a plain struct can't mix properties and children."""
        n = node("point", props={"x": 1}, children=[node("y", 2)])
        with pytest.raises(AmbiguousNode):
            from_node(n, Point)

    def test_empty_children_block_still_ambiguous(self):
        """Test that empty braces count as a children block."""
        n = node("point", props={"x": 1, "y": 2}, children=[])
        with pytest.raises(AmbiguousNode):
            from_node(n, Point)

    def test_arguments_rejected(self):
        """Test that structs have no positional fields."""
        with pytest.raises(UnexpectedArguments):
            from_node(node("point", 1, 2), Point)

    def test_missing_field(self):
        """Test a required field without data."""
        with pytest.raises(MissingField) as info:
            from_node(node("point", props={"x": 1}), Point)
        assert info.value.field == "y"

    def test_unknown_field(self):
        """Test a key that isn't a field."""
        with pytest.raises(UnexpectedField) as info:
            from_node(node("point", props={"x": 1, "y": 2, "z": 3}), Point)
        assert info.value.field == "z"

    def test_duplicate_property(self):
        """Test that structs reject a key given twice."""
        n = node("point", props=[("x", 1), ("x", 2), ("y", 3)])
        with pytest.raises(DuplicateField):
            from_node(n, Point)

    def test_duplicate_child(self):
        """Test that structs reject a child name given twice."""
        n = node("point", children=[node("x", 1), node("y", 2), node("y", 3)])
        with pytest.raises(DuplicateField):
            from_node(n, Point)

    def test_allow_unknown(self):
        """Test that the catch-all drops unknown keys."""
        n = node("loose", props={"x": 1, "extra": "whatever"})
        assert from_node(n, Loose) == Loose(1)

    def test_optional_and_default_fields(self):
        """Test absent optional fields and dataclass defaults."""
        assert from_node(node("partial", props={"x": 1}), Partial) == Partial(1, None, 1.0)

    def test_optional_field_keeps_default(self):
        """Test that an absent optional field with a default keeps it."""
        assert from_node(node("withdefault"), WithDefault) == WithDefault(80, 1.0, None)

    def test_optional_field_given(self):
        """Test that a present optional field overrides its default."""
        n = node("withdefault", props={"port": 8080, "scale": None})
        assert from_node(n, WithDefault) == WithDefault(8080, None, None)

    def test_ignored_field(self):
        """Test that ignored fields accept anything."""
        n = node("withignored", children=[node("keep", 1), node("skip", 1, props={"a": 2})])
        assert from_node(n, WithIgnored) == WithIgnored(1, None)

    def test_plain_dataclass(self):
        """Test a dataclass selected by its class name."""
        assert from_node(node("Limits", props={"low": 0, "high": 9}), Limits) == Limits(0, 9)

    def test_error_path_and_location(self):
        """Test that failures name the field and the node position."""
        n = node("point", props={"x": "one", "y": 2}, location=Location(3, 5))
        with pytest.raises(InvalidType) as info:
            from_node(n, Point)
        assert info.value.path == ["x"]
        assert info.value.location == Location(3, 5)
        assert str(info.value) == (
            "x: invalid type: string 'one', expected int (line 3, column 5)"
        )


class TestCollections:
    """Test sequences, tuples and maps read from a node."""

    def test_list_from_arguments(self):
        """Test a list given as arguments."""
        assert from_node(node("-", 1, 2, 3), list[int]) == [1, 2, 3]

    def test_set_from_arguments(self):
        """Test that the container type is honored."""
        assert from_node(node("-", 1, 2, 1), set[int]) == {1, 2}

    def test_list_from_children(self):
        """Test a list given as anonymous children."""
        n = node("-", children=[node("-", 1), node("-", 2)])
        assert from_node(n, list[int]) == [1, 2]

    def test_list_arguments_and_children_ambiguous(self):
        """Test that a list can't mix arguments and children."""
        with pytest.raises(AmbiguousNode):
            from_node(node("-", 1, children=[node("-", 2)]), list[int])

    def test_list_rejects_properties(self):
        """Test that lists have no keyed entries."""
        with pytest.raises(UnexpectedProperties):
            from_node(node("-", 1, props={"a": 2}), list[int])

    def test_tuple(self):
        """Test a fixed-length tuple."""
        assert from_node(node("-", 1, "a"), tuple[int, str]) == (1, "a")

    def test_tuple_arity(self):
        """Test a tuple given the wrong number of arguments."""
        with pytest.raises(ArityMismatch):
            from_node(node("-", 1), tuple[int, str])

    def test_named_tuple(self):
        """Test a named tuple selected by its class name."""
        assert from_node(node("Span", 1, 4), Span) == Span(1, 4)

    def test_map_from_properties_last_wins(self):
        """Test that maps keep the last of duplicated properties."""
        n = node("-", props=[("a", 1), ("b", 2), ("a", 3)])
        assert from_node(n, dict[str, int]) == {"a": 3, "b": 2}

    def test_map_from_children(self):
        """Test a map keyed by child names."""
        n = node("-", children=[node("a", 1), node("b", 2), node("a", 5)])
        assert from_node(n, dict[str, int]) == {"a": 5, "b": 2}

    def test_map_rejects_arguments(self):
        """Test that maps have no positional entries."""
        with pytest.raises(UnexpectedArguments):
            from_node(node("-", 1), dict[str, int])

    def test_recursive_alias(self):
        """Test a map nested through a self-referencing alias."""
        n = node("-", children=[node("a", children=[node("b")]), node("c")])
        assert from_node(n, Outline) == {"a": {"b": None}, "c": None}

    def test_map_with_enum_keys(self):
        """Test keys resolved as unit variants."""
        n = node("-", props={"RED": 1, "GREEN": 2})
        assert from_node(n, dict[Color, int]) == {Color.RED: 1, Color.GREEN: 2}


class TestEnums:
    """Test variants selected by the first argument."""

    def test_tuple_variant(self):
        """Test a variant whose payload is the remaining arguments."""
        n = node("-", children=[node("shape", "circle", 1.5)])
        assert from_node(n, dict[str, Circle | Rect]) == {"shape": Circle(1.5)}

    def test_struct_variant(self):
        """Test a variant whose payload is the properties."""
        n = node("-", children=[node("shape", "rect", props={"width": 2, "height": 3})])
        assert from_node(n, dict[str, Circle | Rect]) == {"shape": Rect(2.0, 3.0)}

    def test_unit_variant(self):
        """Test a unit variant with nothing left over."""
        n = node("-", children=[node("fav", "GREEN")])
        assert from_node(n, dict[str, Color]) == {"fav": Color.GREEN}

    def test_unit_variant_with_data(self):
        """Test a unit variant with leftover arguments."""
        n = node("-", children=[node("fav", "GREEN", 1)])
        with pytest.raises(UnexpectedData):
            from_node(n, dict[str, Color])

    def test_missing_selector(self):
        """Test an enum without a selecting argument."""
        n = node("-", children=[node("shape", props={"width": 2})])
        with pytest.raises(MissingVariantSelector) as info:
            from_node(n, dict[str, Circle | Rect])
        assert info.value.path == ["shape"]

    def test_unknown_selector(self):
        """Test a selector naming no variant."""
        n = node("-", children=[node("shape", "triangle")])
        with pytest.raises(UnknownVariant):
            from_node(n, dict[str, Circle | Rect])


class TestScalarsAndUnits:
    """Test primitives, options, units and newtypes read from a node."""

    def test_primitive(self):
        """Test a primitive from a single argument."""
        assert from_node(node("-", 7), int) == 7

    @pytest.mark.parametrize(
        "n",
        [
            node("-"),
            node("-", 1, 2),
            node("-", 1, props={"a": 2}),
            node("-", 1, children=[]),
        ],
    )
    def test_primitive_arity(self, n):
        """Test that primitives need exactly one argument and nothing else."""
        with pytest.raises(ArityMismatch):
            from_node(n, int)

    def test_option_empty(self):
        """Test that an empty node is None."""
        assert from_node(node("-"), int | None) is None

    def test_option_null(self):
        """Test that a single null argument is None."""
        assert from_node(node("-", None), int | None) is None

    def test_option_some(self):
        """Test that other content resolves the inner shape."""
        assert from_node(node("-", 4), int | None) == 4

    def test_unit(self):
        """Test the unit shape."""
        assert from_node(node("-"), None) is None

    def test_unit_struct(self):
        """Test a fieldless record."""
        assert from_node(node("marker"), Marker) == Marker()

    @pytest.mark.parametrize(
        "n",
        [
            node("marker", 1),
            node("marker", props={"a": 1}),
            node("marker", children=[]),
        ],
    )
    def test_unit_struct_with_data(self, n):
        """Test that unit shapes reject any content, even empty braces."""
        with pytest.raises(UnexpectedData):
            from_node(n, Marker)

    def test_newtype(self):
        """Test a newtype wrapping the whole node."""
        assert from_node(node("meters", 3), Meters) == Meters(3.0)

    def test_any_needs_hint(self):
        """Test that unrestricted shapes can't be read from nodes."""
        n = node("-", children=[node("a", 1)])
        with pytest.raises(TypeHintRequired):
            from_node(n, dict[str, Any])
