"""Formal specification for the bit calculator.

Each operation is specified as a collection of:
- postconditions: what the new value must satisfy given the old value
  and the operand
- error conditions: what inputs must cause specific exceptions
- algebraic properties: relationships between operations that must hold

Rendering is specified the same way, as postconditions over the bit
pattern and the rendered four-base form.

The spec is machine-readable.  Conformance tests iterate over it, so a
new postcondition is covered without writing a new test.

All values in predicates are *numeric values* of the integer type
(negative for signed types), never raw patterns, unless the name says
``pattern``.

Layers
------
OperationSpec   per-operation contract (post/error/properties)
RenderSpec      postconditions every rendered form must meet
CalculatorSpec  the full contract for one IntegerType
build_spec()    constructs a CalculatorSpec for a given IntegerType
run_operation() applies one named operation to a fresh value
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from calculator import BitCalculator, truncdiv, truncmod
from errors import DivideByZero, IndexOutOfRange
from inttypes import IntegerType
from render import RenderedForm


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    arity: int          # operands besides the current value
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition] = field(default_factory=list)
    properties: list[AlgebraicProperty] = field(default_factory=list)


@dataclass(frozen=True)
class RenderSpec:
    postconditions: list[Postcondition]


@dataclass(frozen=True)
class CalculatorSpec:
    """Complete contract for one integer type."""

    int_type: IntegerType
    operations: dict[str, OperationSpec]
    render: RenderSpec

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out


# ---------------------------------------------------------------------------
# Helpers used inside the spec predicates
# ---------------------------------------------------------------------------

def run_operation(int_type: IntegerType, name: str, value: int, *args: int) -> int:
    """Apply operation ``name`` to a fresh value and return the new value."""
    calc = BitCalculator.from_value(int_type, value)
    getattr(calc, name)(*args)
    return calc.value


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def build_spec(int_type: IntegerType) -> CalculatorSpec:
    """Construct the full calculator specification for an integer type."""
    t = int_type

    def _wrap(raw: int) -> int:
        return t.to_value(t.wrap(raw))

    def _pattern(v: int) -> int:
        return t.to_pattern(v)

    def _shift(count: int) -> int:
        return _pattern(count) & (t.width - 1)

    def binary(name: str, description: str, expected: Callable[[int, int], int]):
        return Postcondition(
            name, description,
            lambda a, b, result: result == expected(a, b),
        )

    def in_range() -> Postcondition:
        return Postcondition(
            "result_in_range", "Result is representable in the type",
            lambda a, *rest: t.contains(rest[-1]),
        )

    operations: dict[str, OperationSpec] = {}

    # ------------------------------------------------------------ arithmetic
    operations["add"] = OperationSpec(
        name="add",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result equals wrapped sum",
                   lambda a, b: _wrap(a + b)),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a)", 2,
                lambda run, a, b: run("add", a, b) == run("add", b, a),
            ),
            AlgebraicProperty(
                "identity", "add(a, 0) == a", 1,
                lambda run, a: run("add", a, 0) == a,
            ),
            AlgebraicProperty(
                "inverse", "subtract(add(a, b), b) == a", 2,
                lambda run, a, b: run("subtract", run("add", a, b), b) == a,
            ),
        ],
    )

    operations["subtract"] = OperationSpec(
        name="subtract",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result equals wrapped difference",
                   lambda a, b: _wrap(a - b)),
        ],
        properties=[
            AlgebraicProperty(
                "self_inverse", "subtract(a, a) == 0", 1,
                lambda run, a: run("subtract", a, a) == 0,
            ),
        ],
    )

    operations["multiply"] = OperationSpec(
        name="multiply",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result equals wrapped product",
                   lambda a, b: _wrap(a * b)),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "multiply(a, b) == multiply(b, a)", 2,
                lambda run, a, b: run("multiply", a, b) == run("multiply", b, a),
            ),
            AlgebraicProperty(
                "zero", "multiply(a, 0) == 0", 1,
                lambda run, a: run("multiply", a, 0) == 0,
            ),
        ],
    )

    operations["divide"] = OperationSpec(
        name="divide",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result equals wrapped truncating quotient",
                   lambda a, b: _wrap(truncdiv(a, b))),
        ],
        error_conditions=[
            ErrorCondition(
                "divide_by_zero", "DivideByZero when divisor is 0",
                lambda a, b: b == 0, DivideByZero,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "identity", "divide(a, 1) == a", 1,
                lambda run, a: run("divide", a, 1) == a,
            ),
        ],
    )

    operations["modulus"] = OperationSpec(
        name="modulus",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result equals truncating remainder",
                   lambda a, b: _wrap(truncmod(a, b))),
        ],
        error_conditions=[
            ErrorCondition(
                "modulus_by_zero", "DivideByZero when divisor is 0",
                lambda a, b: b == 0, DivideByZero,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "division_identity",
                "divide(a, b) * b + modulus(a, b) == a (wrapped, b != 0)", 2,
                lambda run, a, b: b == 0 or _wrap(
                    run("divide", a, b) * b + run("modulus", a, b)
                ) == a,
            ),
        ],
    )

    operations["negate"] = OperationSpec(
        name="negate",
        arity=0,
        postconditions=[
            in_range(),
            Postcondition(
                "result_correct", "Result equals wrapped negation",
                lambda a, result: result == _wrap(-a),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "involution", "negate(negate(a)) == a", 1,
                lambda run, a: run("negate", run("negate", a)) == a,
            ),
        ],
    )

    # --------------------------------------------------------------- bitwise
    operations["bitwise_not"] = OperationSpec(
        name="bitwise_not",
        arity=0,
        postconditions=[
            in_range(),
            Postcondition(
                "result_correct", "Every bit is flipped",
                lambda a, result: _pattern(result) == _pattern(a) ^ t.mask,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "involution", "bitwise_not(bitwise_not(a)) == a", 1,
                lambda run, a: run("bitwise_not", run("bitwise_not", a)) == a,
            ),
        ],
    )

    operations["bitwise_and"] = OperationSpec(
        name="bitwise_and",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result is the bitwise AND of patterns",
                   lambda a, b: t.to_value(_pattern(a) & _pattern(b))),
        ],
        properties=[
            AlgebraicProperty(
                "idempotence", "bitwise_and(a, a) == a", 1,
                lambda run, a: run("bitwise_and", a, a) == a,
            ),
        ],
    )

    operations["bitwise_or"] = OperationSpec(
        name="bitwise_or",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result is the bitwise OR of patterns",
                   lambda a, b: t.to_value(_pattern(a) | _pattern(b))),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "bitwise_or(a, b) == bitwise_or(b, a)", 2,
                lambda run, a, b: run("bitwise_or", a, b) == run("bitwise_or", b, a),
            ),
        ],
    )

    operations["bitwise_xor"] = OperationSpec(
        name="bitwise_xor",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Result is the bitwise XOR of patterns",
                   lambda a, b: t.to_value(_pattern(a) ^ _pattern(b))),
        ],
        properties=[
            AlgebraicProperty(
                "self_inverse", "bitwise_xor(a, a) == 0", 1,
                lambda run, a: run("bitwise_xor", a, a) == 0,
            ),
        ],
    )

    operations["shift_left"] = OperationSpec(
        name="shift_left",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Pattern shifted left, high bits dropped",
                   lambda a, n: t.to_value(t.wrap(_pattern(a) << _shift(n)))),
        ],
    )

    operations["shift_right"] = OperationSpec(
        name="shift_right",
        arity=1,
        postconditions=[
            in_range(),
            binary("result_correct", "Pattern shifted right, zero filled",
                   lambda a, n: t.to_value(_pattern(a) >> _shift(n))),
            Postcondition(
                "zero_fill", "Top bit is clear after a non-zero shift",
                lambda a, n, result: (
                    _shift(n) == 0 or not _pattern(result) & t.sign_bit
                ),
            ),
        ],
    )

    # ------------------------------------------------------------ bit access
    operations["set_bit"] = OperationSpec(
        name="set_bit",
        arity=2,
        postconditions=[
            Postcondition(
                "bit_written", "Only the addressed bit changes",
                lambda a, index, bit, result: (
                    _pattern(result) ^ _pattern(a)
                ) & ~(1 << index) == 0
                and bool(_pattern(result) >> index & 1) == bool(bit),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "index_out_of_range", "IndexOutOfRange outside [0, width)",
                lambda a, index, bit: not 0 <= index < t.width,
                IndexOutOfRange,
            ),
        ],
    )

    # -------------------------------------------------------------- render
    render = RenderSpec(postconditions=[
        Postcondition(
            "binary_length", "Binary has exactly width characters",
            lambda pattern, form: len(form.binary) == t.width,
        ),
        Postcondition(
            "binary_value", "Binary reads back as the pattern",
            lambda pattern, form: int(form.binary, 2) == pattern,
        ),
        Postcondition(
            "hex_length", "Hex has two digits per byte",
            lambda pattern, form: len(form.hexadecimal) == t.width // 4,
        ),
        Postcondition(
            "hex_value", "Hex reads back as the pattern",
            lambda pattern, form: bytes.fromhex(form.hexadecimal)
            == pattern.to_bytes(t.byte_count, "big"),
        ),
        Postcondition(
            "hex_uppercase", "Hex uses uppercase digits",
            lambda pattern, form: form.hexadecimal == form.hexadecimal.upper(),
        ),
        Postcondition(
            "octal_length", "Octal has one digit per started 3-bit group",
            lambda pattern, form: len(form.octal) == -(-t.width // 3),
        ),
        Postcondition(
            "octal_value", "Octal reads back as the pattern",
            lambda pattern, form: int(form.octal, 8) == pattern,
        ),
        Postcondition(
            "decimal_value", "Decimal is the signed numeric value",
            lambda pattern, form: int(form.decimal) == t.to_value(pattern),
        ),
    ])

    return CalculatorSpec(int_type=t, operations=operations, render=render)


def check_render(spec: CalculatorSpec, pattern: int, form: RenderedForm) -> list[str]:
    """Return the names of render postconditions that ``form`` violates."""
    return [
        post.name for post in spec.render.postconditions
        if not post.check(pattern, form)
    ]
