"""Raw text parsing into bit patterns.

Decimal text is a signed numeric literal that must lie in the target
type's range.  Binary, octal and hexadecimal text is a *bit pattern*:
it may use every bit of the width, so ``11111111`` parsed as int8 is -1.
Pattern literals accept an optional ``0b``/``0o``/``0x`` prefix and
whitespace or underscores between digits, which lets the grouped
binary display be pasted straight back in.
"""
from __future__ import annotations

import re

from calculator import BitCalculator
from errors import FormatError
from inttypes import Base, IntegerType

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_SEPARATORS = re.compile(r"[\s_]+")

_PREFIXES = {
    Base.BINARY: "0b",
    Base.OCTAL: "0o",
    Base.HEXADECIMAL: "0x",
}

_DIGIT_CLASSES = {
    Base.BINARY: "[01]",
    Base.OCTAL: "[0-7]",
    Base.HEXADECIMAL: "[0-9a-fA-F]",
}


def _pattern_regex(base: Base) -> re.Pattern:
    digit = _DIGIT_CLASSES[base]
    return re.compile(rf"{digit}+(?:[\s_]+{digit}+)*")


_PATTERN_LITERALS = {base: _pattern_regex(base) for base in _DIGIT_CLASSES}


def parse_text(text: str, int_type: IntegerType, base: Base = Base.DECIMAL) -> int:
    """Parse ``text`` in ``base`` and return the bit pattern for ``int_type``."""
    stripped = text.strip()
    if not stripped:
        raise FormatError(text, "empty input")

    if base == Base.DECIMAL:
        return _parse_decimal(text, stripped, int_type)
    return _parse_pattern(text, stripped, int_type, base)


def parse_value(
    text: str, int_type: IntegerType, base: Base = Base.DECIMAL
) -> BitCalculator:
    return BitCalculator(int_type=int_type, bits=parse_text(text, int_type, base))


def _parse_decimal(text: str, stripped: str, int_type: IntegerType) -> int:
    if not _DECIMAL.fullmatch(stripped):
        raise FormatError(text, "not a decimal integer literal")
    out_of_range = FormatError(
        text, f"out of range for {int_type} [{int_type.lo}, {int_type.hi}]"
    )

    negative = stripped[0] == "-"
    digits = stripped.lstrip("+-").lstrip("0") or "0"
    # Length check first: int() refuses very long decimal strings.
    limit = -int_type.lo if negative else int_type.hi
    if len(digits) > len(str(limit)):
        raise out_of_range

    value = -int(digits) if negative else int(digits)
    if not int_type.contains(value):
        raise out_of_range
    return int_type.to_pattern(value)


def _parse_pattern(
    text: str, stripped: str, int_type: IntegerType, base: Base
) -> int:
    prefix = _PREFIXES[base]
    if stripped[:2].lower() == prefix:
        stripped = stripped[2:]

    if not _PATTERN_LITERALS[base].fullmatch(stripped):
        raise FormatError(text, f"not a base-{base.radix} literal")

    pattern = int(_SEPARATORS.sub("", stripped), base.radix)
    if pattern.bit_length() > int_type.width:
        raise FormatError(text, f"does not fit in {int_type.width} bits")
    return pattern
