"""Spec conformance tests.

These tests are *driven by* the spec: they iterate over every
postcondition, error condition, and algebraic property defined in
``spec.build_spec`` and verify the implementation satisfies them.

8-bit types are checked exhaustively; wider types with Hypothesis.
"""
from __future__ import annotations

import itertools
from functools import partial

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from calculator import BitCalculator
from inttypes import INT8, INT32, SUPPORTED_TYPES, UINT8, UINT64
from render import render_all
from spec import build_spec, check_render, run_operation

SPECS = {t: build_spec(t) for t in SUPPORTED_TYPES}
BINARY_OPS = [
    name for name, op in SPECS[INT8].operations.items()
    if op.arity == 1
]
UNARY_OPS = [
    name for name, op in SPECS[INT8].operations.items()
    if op.arity == 0
]


def _outcome(int_type, name, a, *args):
    """Run an op, returning the new value or the raised exception type."""
    try:
        return run_operation(int_type, name, a, *args)
    except Exception as e:
        return type(e)


def _check_op(int_type, name, a, *args):
    op = SPECS[int_type].operations[name]
    triggered = [ec for ec in op.error_conditions if ec.trigger(a, *args)]
    result = _outcome(int_type, name, a, *args)
    if triggered:
        assert result is triggered[0].exception, (
            f"{name}({a}, {args}) should raise {triggered[0].exception.__name__}"
        )
        return
    for post in op.postconditions:
        assert post.check(a, *args, result), (
            f"Postcondition '{post.name}' failed: {int_type} {name}{(a, *args)} = {result}"
        )


# ===================================================================
# EXHAUSTIVE — every 8-bit value pair
# ===================================================================

class TestExhaustive8Bit:

    @pytest.mark.parametrize("int_type", [INT8, UINT8], ids=str)
    @pytest.mark.parametrize("name", BINARY_OPS)
    def test_binary_ops(self, int_type, name):
        values = range(int_type.lo, int_type.hi + 1)
        for a, b in itertools.product(values, repeat=2):
            _check_op(int_type, name, a, b)

    @pytest.mark.parametrize("int_type", [INT8, UINT8], ids=str)
    @pytest.mark.parametrize("name", UNARY_OPS)
    def test_unary_ops(self, int_type, name):
        for a in range(int_type.lo, int_type.hi + 1):
            _check_op(int_type, name, a)

    @pytest.mark.parametrize("int_type", [INT8, UINT8], ids=str)
    def test_set_bit(self, int_type):
        for a in range(int_type.lo, int_type.hi + 1):
            for index in range(-1, 9):
                for bit in (False, True):
                    _check_op(int_type, "set_bit", a, index, bit)

    @pytest.mark.parametrize("int_type", [INT8, UINT8], ids=str)
    def test_render(self, int_type):
        spec = SPECS[int_type]
        for pattern in range(256):
            form = render_all(BitCalculator(int_type=int_type, bits=pattern))
            assert check_render(spec, pattern, form) == []


# ===================================================================
# PROPERTY-BASED — wider types
# ===================================================================

@st.composite
def operation_case(draw, arity):
    int_type = draw(st.sampled_from(SUPPORTED_TYPES))
    values = st.integers(min_value=int_type.lo, max_value=int_type.hi)
    args = [draw(values) for _ in range(arity + 1)]
    return int_type, args


class TestPostconditions:

    @given(case=operation_case(1), name=st.sampled_from(BINARY_OPS))
    @settings(max_examples=500)
    def test_binary_ops(self, case, name):
        int_type, args = case
        _check_op(int_type, name, *args)

    @given(case=operation_case(0), name=st.sampled_from(UNARY_OPS))
    @settings(max_examples=200)
    def test_unary_ops(self, case, name):
        int_type, args = case
        _check_op(int_type, name, *args)

    @given(case=operation_case(0), data=st.data())
    def test_set_bit(self, case, data):
        int_type, (a,) = case
        index = data.draw(st.integers(min_value=-2, max_value=int_type.width + 1))
        _check_op(int_type, "set_bit", a, index, data.draw(st.booleans()))

    @given(int_type=st.sampled_from(SUPPORTED_TYPES), data=st.data())
    @settings(max_examples=300)
    def test_render(self, int_type, data):
        pattern = data.draw(st.integers(min_value=0, max_value=int_type.mask))
        form = render_all(BitCalculator(int_type=int_type, bits=pattern))
        assert check_render(SPECS[int_type], pattern, form) == []


# ===================================================================
# ALGEBRAIC PROPERTIES
# ===================================================================

class TestAlgebraicProperties:
    """Every algebraic property in the spec holds for random inputs."""

    @pytest.mark.parametrize("int_type", [INT8, INT32, UINT64], ids=str)
    @given(data=st.data())
    @settings(max_examples=100)
    def test_all_properties(self, int_type, data):
        spec = SPECS[int_type]
        run = partial(run_operation, int_type)
        values = st.integers(min_value=int_type.lo, max_value=int_type.hi)
        for op_name, prop in spec.all_properties:
            args = [data.draw(values) for _ in range(prop.arity)]
            assert prop.check(run, *args), (
                f"{op_name}.{prop.name} failed for {int_type} {args}"
            )


# ===================================================================
# CONCRETE CASES
# ===================================================================

class TestConcreteCases:

    def test_octal_examples(self):
        assert render_all(BitCalculator.from_value(UINT8, 255)).octal == "377"

    def test_logical_shift(self):
        assert run_operation(INT8, "shift_right", -128, 1) == 0b0100_0000

    def test_negate_min(self):
        assert run_operation(INT8, "negate", -128) == -128

    def test_spec_covers_every_mutator(self):
        names = set(SPECS[INT8].operations)
        assert {
            "add", "subtract", "multiply", "divide", "modulus", "negate",
            "bitwise_not", "bitwise_and", "bitwise_or", "bitwise_xor",
            "shift_left", "shift_right", "set_bit",
        } <= names
