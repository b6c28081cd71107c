"""Base rendering for bit-addressable values.

Hex, octal and binary are rendered from the raw bit pattern and always
have a fixed length for the value's width: no leading-zero suppression
happens here.  Negative signed values therefore show their
two's-complement pattern in those bases.  Decimal is the only base that
renders the signed numeric value.

Display policy (trimming, grouping, prefixes) lives at the bottom of
this module and only ever post-processes the fixed-length strings.
"""
from __future__ import annotations

from dataclasses import dataclass

from calculator import BitCalculator
from inttypes import Base

HEX_DIGITS = "0123456789ABCDEF"


@dataclass(frozen=True)
class RenderedForm:
    """The four textual forms of one bit pattern, mutually consistent."""

    hexadecimal: str
    decimal: str
    octal: str
    binary: str

    def for_base(self, base: Base) -> str:
        return {
            Base.HEXADECIMAL: self.hexadecimal,
            Base.DECIMAL: self.decimal,
            Base.OCTAL: self.octal,
            Base.BINARY: self.binary,
        }[base]


# ---------------------------------------------------------------------------
# Per-base renderers
# ---------------------------------------------------------------------------

def to_binary(calc: BitCalculator) -> str:
    """One character per bit, most significant bit first."""
    return "".join(
        "1" if calc.get_bit(i) else "0" for i in range(calc.width - 1, -1, -1)
    )


def to_hex(calc: BitCalculator) -> str:
    """Two uppercase digits per byte of the big-endian byte sequence."""
    digits = []
    for byte in calc.to_bytes("big"):
        digits.append(HEX_DIGITS[byte // 16])
        digits.append(HEX_DIGITS[byte % 16])
    return "".join(digits)


def to_decimal(calc: BitCalculator) -> str:
    return str(calc.value)


def to_octal(calc: BitCalculator) -> str:
    """Octal expansion of the raw bit pattern.

    Widths are multiples of 8, never of 3, so the top one or two bits
    form a partial leading digit and the rest split into full 3-bit
    groups down to bit 0.
    """
    bit_count = calc.width
    leftover = bit_count % 3
    digits = []

    if leftover == 2:
        digits.append(
            2 * calc.get_bit_value(bit_count - 1) + calc.get_bit_value(bit_count - 2)
        )
    elif leftover == 1:
        digits.append(calc.get_bit_value(bit_count - 1))

    for i in range(bit_count - leftover - 1, -1, -3):
        digits.append(
            4 * calc.get_bit_value(i)
            + 2 * calc.get_bit_value(i - 1)
            + calc.get_bit_value(i - 2)
        )
    return "".join(str(d) for d in digits)


def render(calc: BitCalculator, base: Base) -> str:
    return _RENDERERS[base](calc)


def render_all(calc: BitCalculator) -> RenderedForm:
    """Render all four bases from the same bit pattern."""
    return RenderedForm(
        hexadecimal=to_hex(calc),
        decimal=to_decimal(calc),
        octal=to_octal(calc),
        binary=to_binary(calc),
    )


_RENDERERS = {
    Base.BINARY: to_binary,
    Base.OCTAL: to_octal,
    Base.DECIMAL: to_decimal,
    Base.HEXADECIMAL: to_hex,
}


# ---------------------------------------------------------------------------
# Display policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DisplayForm:
    hexadecimal: str
    decimal: str
    octal: str
    binary: str


def trim_leading_zeros(text: str) -> str:
    """Strip leading zeros, keeping a single ``0`` for an all-zero string."""
    return text.lstrip("0") or "0"


def group_binary(
    text: str, groups_per_line: int = 8, drop_leading: bool = True
) -> str:
    """Split binary text into space-separated nibbles.

    With ``drop_leading`` set, leading all-zero nibbles are dropped (at
    least one nibble stays).  A line break follows every
    ``groups_per_line`` nibbles.
    """
    if groups_per_line < 1:
        raise ValueError(f"groups_per_line must be >= 1, got {groups_per_line}")
    padded = text.zfill(-(-len(text) // 4) * 4)
    nibbles = [padded[i:i + 4] for i in range(0, len(padded), 4)]

    start = 0
    while drop_leading and start < len(nibbles) - 1 and nibbles[start] == "0000":
        start += 1
    nibbles = nibbles[start:]

    lines = [
        " ".join(nibbles[i:i + groups_per_line])
        for i in range(0, len(nibbles), groups_per_line)
    ]
    return "\n".join(lines)


def format_for_display(form: RenderedForm, options) -> DisplayForm:
    """Apply a ``models.DisplayOptions`` policy to a rendered form."""
    hexadecimal, octal, binary = form.hexadecimal, form.octal, form.binary
    if options.trim_leading_zeros:
        hexadecimal = trim_leading_zeros(hexadecimal)
        octal = trim_leading_zeros(octal)
        if not options.group_binary:
            binary = trim_leading_zeros(binary)
    if options.group_binary:
        binary = group_binary(
            binary, options.groups_per_line, options.trim_leading_zeros
        )

    if options.hex_prefix:
        hexadecimal = "0x" + hexadecimal
    if options.bin_prefix:
        binary = "0b" + binary

    return DisplayForm(
        hexadecimal=hexadecimal,
        decimal=form.decimal,
        octal=octal,
        binary=binary,
    )
