"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
or:
    bitcalc-server
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from api import router, set_session
from models import DisplayOptions
from session import CalculatorSession


def create_app(
    session: CalculatorSession | None = None,
    display: DisplayOptions | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional session for testing; creates a fresh one if
    omitted.  ``display`` overrides the session's display options.
    """
    if session is None:
        session = CalculatorSession()
    if display is not None:
        session.display = display

    set_session(session)

    app = FastAPI(
        title="Bit Calculator API",
        description=(
            "Fixed-width integer calculator with per-bit access. Values are "
            "8, 16, 32 or 64 bits wide, signed or unsigned, and every change "
            "returns the value rendered in hexadecimal, decimal, octal and "
            "binary."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(app, host=host, port=port)


# Default app instance for `uvicorn app:app`
app = create_app()
