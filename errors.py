"""Exceptions raised by the bit calculator engine.

Each kind also derives from the closest builtin so callers that only
know ``IndexError`` or ``ZeroDivisionError`` still catch it.
"""

from __future__ import annotations


class CalculatorError(Exception):
    """Base class for every engine error."""


class IndexOutOfRange(CalculatorError, IndexError):
    """Raised when a bit index is outside [0, width)."""

    def __init__(self, index: int, width: int) -> None:
        self.index = index
        self.width = width
        super().__init__(f"bit index {index} out of range [0, {width})")


class DivideByZero(CalculatorError, ZeroDivisionError):
    """Raised by divide/modulus when the divisor is zero."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} by zero")


class FormatError(CalculatorError, ValueError):
    """Raised when text cannot be parsed into a value of the target type."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"cannot parse {text!r}: {reason}")


class InvalidConfiguration(CalculatorError, ValueError):
    """Raised for unsupported width/signedness or inconsistent byte buffers."""


class OperandOutOfRange(CalculatorError, ValueError):
    """Raised when an operand is not representable in the value's type."""

    def __init__(self, operand: int, type_name: str, lo: int, hi: int) -> None:
        self.operand = operand
        self.type_name = type_name
        super().__init__(
            f"{operand} is outside {type_name} range [{lo}, {hi}]"
        )
