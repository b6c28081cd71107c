"""Calculator session: one owned value behind one lock.

Every mutation goes through the session, which applies it to a working
copy, commits the copy and renders the snapshot while still holding the
lock.  A reader therefore never sees a value whose rendered forms belong
to an earlier state, and a failed mutation never changes anything.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import asdict
from typing import Callable, Iterator

from calculator import BitCalculator
from errors import CalculatorError, InvalidConfiguration
from inttypes import UINT64, Base, IntegerType, integer_type
from models import ChangeSource, DisplayOptions, Operation, Rendering, Snapshot
from parse import parse_text
from render import format_for_display, render_all

logger = logging.getLogger(__name__)


class CalculatorSession:
    """Owns one BitCalculator and serializes mutate-then-render."""

    def __init__(
        self,
        int_type: IntegerType = UINT64,
        value: int = 0,
        display: DisplayOptions | None = None,
    ) -> None:
        self._calc = BitCalculator.from_value(int_type, value)
        self._lock = threading.Lock()
        self.display = display or DisplayOptions()

    @property
    def int_type(self) -> IntegerType:
        return self._calc.int_type

    # -- helpers -------------------------------------------------------------

    def _snapshot(self, source: ChangeSource) -> Snapshot:
        """Render the current value.  Caller must hold the lock."""
        calc = self._calc
        form = render_all(calc)
        shown = format_for_display(form, self.display)
        return Snapshot(
            width=calc.width,
            signed=calc.signed,
            value=calc.value,
            bits=[calc.get_bit(i) for i in range(calc.width)],
            rendered=Rendering(**asdict(form)),
            display=Rendering(**asdict(shown)),
            source=source,
        )

    def _commit(
        self,
        change: Callable[[BitCalculator], BitCalculator | None],
        source: ChangeSource,
        label: str,
    ) -> Snapshot:
        with self._lock:
            work = self._calc.copy()
            try:
                replacement = change(work)
            except CalculatorError as e:
                logger.warning("%s rejected on %s: %s", label, work.int_type, e)
                raise
            self._calc = replacement if replacement is not None else work
            logger.debug("%s -> %s %#x", label, self._calc.int_type, self._calc.bits)
            return self._snapshot(source)

    # -- scoped access -------------------------------------------------------

    @contextmanager
    def access(self) -> Iterator[BitCalculator]:
        """Hold the lock and expose a working copy for a multi-step change.

        The copy replaces the value only when the block exits normally;
        if it raises, every step inside it is discarded.  Render inside
        the block to get a consistent view.
        """
        with self._lock:
            work = self._calc.copy()
            yield work
            self._calc = work
            logger.debug("access -> %s %#x", work.int_type, work.bits)

    # -- queries -------------------------------------------------------------

    def snapshot(self, source: ChangeSource = ChangeSource.NONE) -> Snapshot:
        with self._lock:
            return self._snapshot(source)

    def get_bit(self, index: int) -> bool:
        with self._lock:
            return self._calc.get_bit(index)

    # -- mutations -----------------------------------------------------------

    def set_bit(self, index: int, value: bool) -> Snapshot:
        return self._commit(
            lambda c: c.set_bit(index, value),
            ChangeSource.BIT_FIELD,
            f"set_bit({index}, {value})",
        )

    def toggle_bit(self, index: int) -> Snapshot:
        def _toggle(c: BitCalculator) -> None:
            c.toggle_bit(index)

        return self._commit(
            _toggle, ChangeSource.BIT_FIELD, f"toggle_bit({index})"
        )

    def apply(self, operation: Operation, operand: int | None = None) -> Snapshot:
        """Apply one arithmetic or bitwise operation."""
        if operation.unary:
            if operand is not None:
                raise InvalidConfiguration(f"{operation.value} takes no operand")
            args: tuple[int, ...] = ()
        else:
            if operand is None:
                raise InvalidConfiguration(f"{operation.value} needs an operand")
            args = (operand,)
        return self._commit(
            lambda c: getattr(c, operation.value)(*args),
            ChangeSource.OPERATION,
            f"{operation.value}{args}",
        )

    def set_text(self, text: str, base: Base = Base.DECIMAL) -> Snapshot:
        """Replace the value with ``text`` parsed in ``base``."""

        def _parse(c: BitCalculator) -> None:
            c.bits = parse_text(text, c.int_type, base)

        return self._commit(
            _parse, ChangeSource.KEYBOARD_INPUT, f"parse({text!r}, {base.name})"
        )

    def resize(self, width: int, signed: bool) -> Snapshot:
        """Switch width/signedness, keeping the value where it fits."""
        new_type = integer_type(width, signed)
        return self._commit(
            lambda c: c.resize(new_type),
            ChangeSource.RESIZE,
            f"resize({new_type})",
        )
