"""
Numeric disambiguation for KDL number literals.

KDL doesn't distinguish between floats and integers, or signed and unsigned
numbers. A number policy classifies a literal into exactly one of a signed
64-bit integer, an unsigned 64-bit integer or a 64-bit float. The default
policy uses these rules:

- If the literal is decimal and contains a fractional part or an exponent,
  it's a float.
- Otherwise, if it's negative, it's a signed integer.
- Otherwise, it's an unsigned integer.

Literal spelling (hex, octal, binary, decimal, ``_`` separators) carries no
other meaning.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from kaydle.errors import NumberOutOfRange

I64_MIN: Final[int] = -(2**63)
U64_MAX: Final[int] = 2**64 - 1

_RADIX_PREFIXES: Final[dict[str, int]] = {"0x": 16, "0o": 8, "0b": 2}


class NumberKind(Enum):
    """Representation picked for a numeric literal."""

    SIGNED = "i64"
    UNSIGNED = "u64"
    FLOAT = "f64"


@dataclass(frozen=True)
class Number:
    """A classified numeric literal."""

    kind: NumberKind
    value: int | float


type NumberPolicy = Callable[[str], Number]


def default_number_policy(literal: str) -> Number:
    """Classify ``literal`` as a signed, unsigned or float number."""
    text = literal.strip().replace("_", "")
    sign = ""
    if text[:1] in ("+", "-"):
        sign, text = text[0], text[1:]

    radix = _RADIX_PREFIXES.get(text[:2].lower())
    try:
        if radix is not None:
            magnitude = int(text[2:], radix)
        elif any(marker in text for marker in ".eE"):
            return Number(NumberKind.FLOAT, float(sign + text))
        else:
            magnitude = int(text, 10)
    except ValueError:
        msg = f"invalid number literal {literal!r}"
        raise NumberOutOfRange(msg, literal) from None

    if sign == "-":
        value = -magnitude
        if value < I64_MIN:
            msg = f"number literal {literal!r} doesn't fit in a signed 64-bit integer"
            raise NumberOutOfRange(msg, literal)
        return Number(NumberKind.SIGNED, value)

    if magnitude > U64_MAX:
        msg = f"number literal {literal!r} doesn't fit in an unsigned 64-bit integer"
        raise NumberOutOfRange(msg, literal)
    return Number(NumberKind.UNSIGNED, magnitude)
