"""Tests for kaydle.errors and error path tracking."""

import pytest

from kaydle.de.context import Context
from kaydle.document import Location
from kaydle.errors import (
    ConversionError,
    DeserializeError,
    InvalidType,
    KaydleError,
    MissingField,
    NumberOutOfRange,
    RecursionLimitExceeded,
    SchemaError,
    UnknownVariant,
)
from kaydle.options import DeserializeOptions


class TestHierarchy:
    """Test the exception hierarchy."""

    def test_schema_error_is_value_error(self):
        """Test that reflection failures are ValueErrors."""
        assert issubclass(SchemaError, KaydleError)
        assert issubclass(SchemaError, ValueError)

    def test_conversion_errors(self):
        """Test that conversion failures are resolution failures."""
        assert issubclass(InvalidType, ConversionError)
        assert issubclass(NumberOutOfRange, ConversionError)
        assert issubclass(ConversionError, DeserializeError)


class TestMessages:
    """Test error rendering."""

    def test_plain(self):
        """Test a message without path or location."""
        assert str(DeserializeError("boom")) == "boom"

    def test_path_and_location(self):
        """Test that the path prefixes and the location suffixes the message."""
        err = DeserializeError("boom", location=Location(4, 2))
        err.path = ["servers", "server[1]", "port"]
        assert str(err) == "servers/server[1]/port: boom (line 4, column 2)"

    def test_structured_fields(self):
        """Test that specific errors keep their details."""
        err = MissingField("port", "server")
        assert err.field == "port"
        assert err.type_name == "server"
        assert "missing field 'port'" in str(err)

    def test_unknown_variant_lists_expected(self):
        """Test that unknown variants name the alternatives."""
        err = UnknownVariant("square", ("circle", "rect"))
        assert str(err) == "unknown variant 'square', expected one of 'circle', 'rect'"


class TestContext:
    """Test depth tracking and path annotation."""

    def test_path_recorded_outermost_first(self):
        """Test that segments are prepended while the error propagates."""
        ctx = Context()
        with pytest.raises(DeserializeError) as info:
            with ctx.enter("outer"):
                with ctx.enter("inner"):
                    raise DeserializeError("boom")
        assert info.value.path == ["outer", "inner"]
        assert ctx.depth == 0

    def test_nearest_location_filled_in(self):
        """Test that errors without a position take the enclosing one."""
        ctx = Context()
        with pytest.raises(DeserializeError) as info:
            with ctx.enter("outer", Location(1, 1)):
                with ctx.enter("inner", Location(2, 4)):
                    raise DeserializeError("boom")
        assert info.value.location == Location(2, 4)

    def test_depth_restored(self):
        """Test that leaving a level restores the depth."""
        ctx = Context()
        with ctx.enter("a"):
            assert ctx.depth == 1
        assert ctx.depth == 0

    def test_depth_limit(self):
        """Test that descending past the limit fails."""
        ctx = Context(options=DeserializeOptions(max_depth=1))
        with pytest.raises(RecursionLimitExceeded) as info:
            with ctx.enter("a"):
                with ctx.enter("b"):
                    pass
        assert info.value.path == ["a"]

    def test_other_errors_untouched(self):
        """Test that non-resolution errors pass through unchanged."""
        ctx = Context()
        with pytest.raises(KeyError):
            with ctx.enter("a"):
                raise KeyError("x")
