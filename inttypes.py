"""
Integer type layer.

An IntegerType describes one fixed-width binary integer: how many bits
it has and whether the top bit carries negative (two's-complement)
weight.  It owns the conversions between the raw bit pattern stored by
the calculator and the numeric value a caller sees.

Every value held by the engine is a *bit pattern*: a Python int in
[0, 2**width).  Signedness only changes how that pattern is read.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from errors import InvalidConfiguration


class Base(Enum):
    """Numeral bases the engine renders and parses."""

    BINARY = 2
    OCTAL = 8
    DECIMAL = 10
    HEXADECIMAL = 16

    @property
    def radix(self) -> int:
        return self.value


@dataclass(frozen=True)
class IntegerType:
    """
    A fixed-width integer type: width in bits plus signedness.

    Arithmetic on any value of this type wraps modulo 2**width, the
    same as native fixed-width machine integers.
    """

    width: int
    signed: bool

    def __post_init__(self):
        if self.width <= 0 or self.width % 8 != 0:
            raise InvalidConfiguration(
                f"width must be a positive multiple of 8, got {self.width}"
            )

    @property
    def name(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.width}"

    @property
    def byte_count(self) -> int:
        return self.width // 8

    @property
    def mask(self) -> int:
        """All-ones pattern for this width."""
        return (1 << self.width) - 1

    @property
    def sign_bit(self) -> int:
        return 1 << (self.width - 1)

    @property
    def lo(self) -> int:
        return -self.sign_bit if self.signed else 0

    @property
    def hi(self) -> int:
        return self.sign_bit - 1 if self.signed else self.mask

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def wrap(self, raw: int) -> int:
        """Reduce any integer to this type's bit pattern (mod 2**width)."""
        return raw & self.mask

    def to_value(self, pattern: int) -> int:
        """Read a bit pattern as a numeric value of this type."""
        if self.signed and pattern & self.sign_bit:
            return pattern - (1 << self.width)
        return pattern

    def to_pattern(self, value: int) -> int:
        """Encode an in-range numeric value as its bit pattern."""
        return value & self.mask

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Supported presets
# ---------------------------------------------------------------------------

INT8 = IntegerType(width=8, signed=True)
UINT8 = IntegerType(width=8, signed=False)
INT16 = IntegerType(width=16, signed=True)
UINT16 = IntegerType(width=16, signed=False)
INT32 = IntegerType(width=32, signed=True)
UINT32 = IntegerType(width=32, signed=False)
INT64 = IntegerType(width=64, signed=True)
UINT64 = IntegerType(width=64, signed=False)

SUPPORTED_TYPES = (INT8, UINT8, INT16, UINT16, INT32, UINT32, INT64, UINT64)
SUPPORTED_WIDTHS = (8, 16, 32, 64)


def integer_type(width: int, signed: bool) -> IntegerType:
    """Look up the supported preset for a width/signedness pair."""
    for t in SUPPORTED_TYPES:
        if t.width == width and t.signed == signed:
            return t
    raise InvalidConfiguration(
        f"unsupported integer type: width={width}, signed={signed}"
    )
