"""Boundary models for the calculator API.

Request payloads, response snapshots and the display configuration.
The engine itself never imports this module: it works on plain ints,
IntegerType and RenderedForm, and the API converts at the edge.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from inttypes import SUPPORTED_WIDTHS, Base


# ---------------------------------------------------------------------------
# Enumerations shared with the session
# ---------------------------------------------------------------------------

class Operation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULUS = "modulus"
    NEGATE = "negate"
    BITWISE_NOT = "bitwise_not"
    BITWISE_AND = "bitwise_and"
    BITWISE_OR = "bitwise_or"
    BITWISE_XOR = "bitwise_xor"
    SHIFT_LEFT = "shift_left"
    SHIFT_RIGHT = "shift_right"

    @property
    def unary(self) -> bool:
        return self in (Operation.NEGATE, Operation.BITWISE_NOT)


class ChangeSource(str, Enum):
    """What triggered a snapshot."""

    NONE = "none"
    BIT_FIELD = "bit_field"
    KEYBOARD_INPUT = "keyboard_input"
    OPERATION = "operation"
    RESIZE = "resize"


class BaseName(str, Enum):
    BINARY = "binary"
    OCTAL = "octal"
    DECIMAL = "decimal"
    HEXADECIMAL = "hexadecimal"

    def to_base(self) -> Base:
        return Base[self.name]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class DisplayOptions(BaseModel):
    """How rendered strings are post-processed for display."""

    trim_leading_zeros: bool = True
    hex_prefix: bool = False
    bin_prefix: bool = False
    group_binary: bool = True
    groups_per_line: int = Field(default=8, ge=1, le=16)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class TypeChange(BaseModel):
    width: int
    signed: bool

    @field_validator("width")
    @classmethod
    def width_supported(cls, v: int) -> int:
        if v not in SUPPORTED_WIDTHS:
            raise ValueError(f"width must be one of {SUPPORTED_WIDTHS}, got {v}")
        return v


class ValueInput(BaseModel):
    text: str = Field(..., max_length=256)
    base: BaseName = BaseName.DECIMAL


class BitUpdate(BaseModel):
    value: bool


class OperationRequest(BaseModel):
    """Apply an operation; ``operand`` is required unless the op is unary."""

    operation: Operation
    operand: int | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class Rendering(BaseModel):
    hexadecimal: str
    decimal: str
    octal: str
    binary: str


class Snapshot(BaseModel):
    """One consistent view of the value, taken under the session lock."""

    width: int
    signed: bool
    value: int
    bits: list[bool] = Field(
        ..., description="Bit states, index 0 is the least significant bit"
    )
    rendered: Rendering
    display: Rendering
    source: ChangeSource = ChangeSource.NONE


class BitState(BaseModel):
    index: int
    value: bool
