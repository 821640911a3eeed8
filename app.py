"""Application factory and entry point.

Run with:
    uvicorn app:app --reload

The log level of the default instance comes from CALCULATOR_LOG_LEVEL.
"""
from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from api import router, set_store
from store import SessionStore

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s | %(message)s"


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Install the root handler once; later calls only adjust the level."""
    logging.basicConfig(format=LOG_FORMAT, datefmt="%H:%M:%S")
    logging.getLogger().setLevel(level.upper())


def create_app(
    store: SessionStore | None = None,
    log_level: str = DEFAULT_LOG_LEVEL,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store for testing; creates a fresh one if omitted.
    """
    if store is None:
        store = SessionStore()

    configure_logging(log_level)
    set_store(store)

    app = FastAPI(
        title="Calculator API",
        description=(
            "Button-level access to four-function calculators. Each session "
            "holds one calculator; every press returns the display and the "
            "pending operation."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app(log_level=os.environ.get("CALCULATOR_LOG_LEVEL", DEFAULT_LOG_LEVEL))
