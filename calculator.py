"""Bit-addressable fixed-width integer.

A ``BitCalculator`` owns one bit pattern of a given ``IntegerType`` and
mutates it in place.  Every operation validates its input first, then
computes the new pattern, then stores it, so a raised error never leaves
a half-applied change behind.

Arithmetic wraps modulo 2**width.  Overflow is not an error.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from errors import (
    DivideByZero,
    IndexOutOfRange,
    InvalidConfiguration,
    OperandOutOfRange,
)
from inttypes import SUPPORTED_TYPES, UINT64, IntegerType, integer_type

MAX_BYTE_COUNT = max(t.byte_count for t in SUPPORTED_TYPES)
BYTE_ORDERS = ("little", "big")
# Shift counts are first cut down to a 32-bit machine integer.
MACHINE_INT_MASK = 0xFFFF_FFFF

Operand = Union[int, "BitCalculator"]


def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division)."""
    q, r = divmod(a, b)
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def truncmod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend, paired with truncdiv."""
    return a - b * truncdiv(a, b)


@dataclass
class BitCalculator:
    int_type: IntegerType = UINT64
    bits: int = 0

    def __setattr__(self, name: str, value) -> None:
        # Every write to ``bits``, including the one in __init__, must fit.
        if name == "bits" and not 0 <= value <= self.int_type.mask:
            raise InvalidConfiguration(
                f"bit pattern {value:#x} does not fit in "
                f"{self.int_type.width} bits"
            )
        super().__setattr__(name, value)

    @classmethod
    def from_value(cls, int_type: IntegerType, value: int = 0) -> BitCalculator:
        """Build from a numeric value that must be in range for the type."""
        if not int_type.contains(value):
            raise OperandOutOfRange(value, int_type.name, int_type.lo, int_type.hi)
        return cls(int_type=int_type, bits=int_type.to_pattern(value))

    # -- numeric view -------------------------------------------------------

    @property
    def width(self) -> int:
        return self.int_type.width

    @property
    def signed(self) -> bool:
        return self.int_type.signed

    @property
    def value(self) -> int:
        """The bit pattern read as a number (negative for signed types)."""
        return self.int_type.to_value(self.bits)

    @value.setter
    def value(self, value: int) -> None:
        self.bits = self._operand(value)

    def __int__(self) -> int:
        return self.value

    def copy(self) -> BitCalculator:
        return BitCalculator(int_type=self.int_type, bits=self.bits)

    # -- internal helpers ---------------------------------------------------

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.width:
            raise IndexOutOfRange(index, self.width)

    def _operand(self, other: Operand) -> int:
        """Return the bit pattern of an operand of this value's type."""
        if isinstance(other, BitCalculator):
            if other.int_type != self.int_type:
                raise InvalidConfiguration(
                    f"operand type {other.int_type} does not match {self.int_type}"
                )
            return other.bits
        if not self.int_type.contains(other):
            raise OperandOutOfRange(
                other, self.int_type.name, self.int_type.lo, self.int_type.hi
            )
        return self.int_type.to_pattern(other)

    def _operand_value(self, other: Operand) -> int:
        return self.int_type.to_value(self._operand(other))

    def _shift_amount(self, count: Operand) -> int:
        as_machine_int = self._operand(count) & MACHINE_INT_MASK
        # Native shifts only look at the low log2(width) bits of the count.
        return as_machine_int & (self.width - 1)

    # -- bit access ---------------------------------------------------------

    def get_bit(self, index: int) -> bool:
        self._check_index(index)
        return bool(self.bits >> index & 1)

    def get_bit_value(self, index: int) -> int:
        """Integer-valued ``get_bit``: 1 if the bit is set, else 0."""
        return 1 if self.get_bit(index) else 0

    def set_bit(self, index: int, value: bool) -> None:
        self._check_index(index)
        if value:
            self.bits |= 1 << index
        else:
            self.bits &= ~(1 << index) & self.int_type.mask

    def toggle_bit(self, index: int) -> bool:
        """Flip one bit and return its new state."""
        self._check_index(index)
        self.bits ^= 1 << index
        return self.get_bit(index)

    # -- arithmetic ---------------------------------------------------------

    def add(self, other: Operand) -> None:
        self.bits = self.int_type.wrap(self.bits + self._operand(other))

    def subtract(self, other: Operand) -> None:
        self.bits = self.int_type.wrap(self.bits - self._operand(other))

    def multiply(self, other: Operand) -> None:
        self.bits = self.int_type.wrap(self.bits * self._operand(other))

    def divide(self, other: Operand) -> None:
        """Truncating division.  MIN / -1 wraps back to MIN."""
        divisor = self._operand_value(other)
        if divisor == 0:
            raise DivideByZero("divide")
        self.bits = self.int_type.wrap(truncdiv(self.value, divisor))

    def modulus(self, other: Operand) -> None:
        """Remainder of truncating division; takes the dividend's sign."""
        divisor = self._operand_value(other)
        if divisor == 0:
            raise DivideByZero("modulus")
        self.bits = self.int_type.wrap(truncmod(self.value, divisor))

    def negate(self) -> None:
        self.bits = self.int_type.wrap(-self.bits)

    # -- bitwise ------------------------------------------------------------

    def bitwise_not(self) -> None:
        self.bits ^= self.int_type.mask

    def bitwise_and(self, other: Operand) -> None:
        self.bits &= self._operand(other)

    def bitwise_or(self, other: Operand) -> None:
        self.bits |= self._operand(other)

    def bitwise_xor(self, other: Operand) -> None:
        self.bits ^= self._operand(other)

    def shift_left(self, count: Operand) -> None:
        self.bits = self.int_type.wrap(self.bits << self._shift_amount(count))

    def shift_right(self, count: Operand) -> None:
        """Logical shift: vacated high bits are always 0, even when signed."""
        self.bits >>= self._shift_amount(count)

    # -- byte serialization -------------------------------------------------

    def to_bytes(self, byteorder: str = "big") -> bytes:
        _check_byteorder(byteorder)
        return self.bits.to_bytes(self.int_type.byte_count, byteorder)

    @classmethod
    def from_bytes(
        cls,
        int_type: IntegerType,
        data: bytes,
        byteorder: str = "little",
        sign_extend: bool | None = None,
    ) -> BitCalculator:
        """Build a value from a raw byte buffer.

        A short buffer is sign-extended when ``sign_extend`` is true
        (defaults to the target type's signedness) and zero-extended
        otherwise.  A buffer longer than the target keeps its least
        significant bytes; that truncation only applies up to
        ``MAX_BYTE_COUNT`` (8) bytes, the widest supported type.  An empty
        buffer or one longer than 8 bytes raises ``InvalidConfiguration``.
        """
        _check_byteorder(byteorder)
        if not 0 < len(data) <= MAX_BYTE_COUNT:
            raise InvalidConfiguration(
                f"byte buffer must hold 1..{MAX_BYTE_COUNT} bytes, got {len(data)}"
            )
        if sign_extend is None:
            sign_extend = int_type.signed

        raw = int.from_bytes(data, byteorder)
        source_bits = len(data) * 8
        if sign_extend and raw >> (source_bits - 1) & 1:
            raw |= int_type.mask & ~((1 << source_bits) - 1)
        return cls(int_type=int_type, bits=int_type.wrap(raw))

    @classmethod
    def create(
        cls,
        width: int,
        signed: bool,
        data: bytes = b"\x00",
        byteorder: str = "little",
    ) -> BitCalculator:
        """Build a value of a supported width/signedness from raw bytes."""
        return cls.from_bytes(integer_type(width, signed), data, byteorder)

    def resize(self, int_type: IntegerType) -> BitCalculator:
        """Re-derive this value for another type from its raw bytes.

        The old bytes are sign-extended when the old type is signed, so a
        value that is representable in the new type keeps its meaning.
        """
        return BitCalculator.from_bytes(
            int_type,
            self.to_bytes("little"),
            byteorder="little",
            sign_extend=self.int_type.signed,
        )


def _check_byteorder(byteorder: str) -> None:
    if byteorder not in BYTE_ORDERS:
        raise InvalidConfiguration(
            f"byteorder must be one of {BYTE_ORDERS}, got {byteorder!r}"
        )
