"""FastAPI REST endpoints for the calculator session.

Routes
------
GET    /calculator                      Current snapshot
PUT    /calculator/type                 Switch width/signedness
PUT    /calculator/value                Parse text into the value
GET    /calculator/bits/{index}         Read one bit
PUT    /calculator/bits/{index}         Set or clear one bit
POST   /calculator/bits/{index}/toggle  Flip one bit
POST   /calculator/operations           Apply an arithmetic/bitwise op
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from errors import CalculatorError, IndexOutOfRange
from models import (
    BitState,
    BitUpdate,
    OperationRequest,
    Snapshot,
    TypeChange,
    ValueInput,
)
from session import CalculatorSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculator", tags=["calculator"])

# The session instance is injected by the app factory (see app.py).
_session: CalculatorSession | None = None


def set_session(session: CalculatorSession) -> None:
    """Inject the session instance. Called once at app startup."""
    global _session
    _session = session


def get_session() -> CalculatorSession:
    assert _session is not None, "Session not initialized"
    return _session


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    detail: str


def _error(e: CalculatorError) -> HTTPException:
    status = 404 if isinstance(e, IndexOutOfRange) else 422
    logger.info("request rejected (%d): %s", status, e)
    return HTTPException(status_code=status, detail=str(e))


_ERRORS = {404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=Snapshot)
def get_snapshot() -> Snapshot:
    """Return the current value in all four bases."""
    return get_session().snapshot()


@router.put("/type", response_model=Snapshot, responses=_ERRORS)
def change_type(payload: TypeChange) -> Snapshot:
    """Switch integer width/signedness."""
    try:
        return get_session().resize(payload.width, payload.signed)
    except CalculatorError as e:
        raise _error(e) from e


@router.put("/value", response_model=Snapshot, responses=_ERRORS)
def set_value(payload: ValueInput) -> Snapshot:
    """Replace the value with parsed text."""
    try:
        return get_session().set_text(payload.text, payload.base.to_base())
    except CalculatorError as e:
        raise _error(e) from e


@router.get("/bits/{index}", response_model=BitState, responses=_ERRORS)
def get_bit(index: int) -> BitState:
    try:
        return BitState(index=index, value=get_session().get_bit(index))
    except CalculatorError as e:
        raise _error(e) from e


@router.put("/bits/{index}", response_model=Snapshot, responses=_ERRORS)
def set_bit(index: int, payload: BitUpdate) -> Snapshot:
    try:
        return get_session().set_bit(index, payload.value)
    except CalculatorError as e:
        raise _error(e) from e


@router.post("/bits/{index}/toggle", response_model=Snapshot, responses=_ERRORS)
def toggle_bit(index: int) -> Snapshot:
    try:
        return get_session().toggle_bit(index)
    except CalculatorError as e:
        raise _error(e) from e


@router.post("/operations", response_model=Snapshot, responses=_ERRORS)
def apply_operation(payload: OperationRequest) -> Snapshot:
    """Apply an arithmetic or bitwise operation to the value."""
    try:
        return get_session().apply(payload.operation, payload.operand)
    except CalculatorError as e:
        raise _error(e) from e
