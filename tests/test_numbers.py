"""Tests for kaydle.numbers module."""

import pytest

from kaydle.errors import ConversionError, NumberOutOfRange
from kaydle.numbers import (
    I64_MIN,
    U64_MAX,
    Number,
    NumberKind,
    default_number_policy,
)


class TestDefaultPolicy:
    """Test the default classification of number literals."""

    @pytest.mark.parametrize(
        ("literal", "expected"),
        [
            ("1.5", 1.5),
            ("-2.25", -2.25),
            ("1e3", 1000.0),
            ("2E-1", 0.2),
        ],
    )
    def test_floats(self, literal, expected):
        """Test that fractions and exponents make a float."""
        assert default_number_policy(literal) == Number(NumberKind.FLOAT, expected)

    def test_negative_is_signed(self):
        """Test that negative integers are signed."""
        assert default_number_policy("-7") == Number(NumberKind.SIGNED, -7)

    def test_positive_is_unsigned(self):
        """Test that other integers are unsigned."""
        assert default_number_policy("42") == Number(NumberKind.UNSIGNED, 42)
        assert default_number_policy("+5") == Number(NumberKind.UNSIGNED, 5)

    @pytest.mark.parametrize(
        ("literal", "expected"),
        [
            ("0xff", 255),
            ("0o17", 15),
            ("0b101", 5),
            ("1_000_000", 1_000_000),
        ],
    )
    def test_spellings(self, literal, expected):
        """Test radix prefixes and separators."""
        assert default_number_policy(literal) == Number(NumberKind.UNSIGNED, expected)

    def test_negative_hex(self):
        """Test a negative radix literal."""
        assert default_number_policy("-0x10") == Number(NumberKind.SIGNED, -16)

    def test_hex_digit_e_is_not_exponent(self):
        """Test that an 'e' inside a hex literal isn't read as an exponent."""
        assert default_number_policy("0xe5") == Number(NumberKind.UNSIGNED, 0xE5)

    def test_bounds(self):
        """Test the edges of the integer ranges."""
        assert default_number_policy(str(U64_MAX)).value == U64_MAX
        assert default_number_policy(str(I64_MIN)).value == I64_MIN

    def test_unsigned_overflow(self):
        """Test a literal above the unsigned range."""
        with pytest.raises(NumberOutOfRange, match="unsigned 64-bit") as info:
            default_number_policy(str(U64_MAX + 1))
        assert info.value.literal == str(U64_MAX + 1)

    def test_signed_overflow(self):
        """Test a literal below the signed range."""
        with pytest.raises(NumberOutOfRange, match="signed 64-bit"):
            default_number_policy(str(I64_MIN - 1))

    def test_invalid_literal(self):
        """Test that garbage is a conversion failure tagged with the literal."""
        with pytest.raises(ConversionError) as info:
            default_number_policy("twelve")
        assert info.value.literal == "twelve"
