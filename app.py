"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import router, set_store
from config import AppConfig, configure_logging
from models import CalculatorSettings
from store import SessionStore


def create_app(
    store: SessionStore | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store and config for testing; otherwise the config
    is read from the environment and a fresh store is created.
    """
    if config is None:
        config = AppConfig.from_env()
    configure_logging(config.log_level)

    if store is None:
        store = SessionStore(
            max_sessions=config.max_sessions,
            default_settings=CalculatorSettings(theme=config.default_theme),
        )

    set_store(store)

    app = FastAPI(
        title="Desk Calculator API",
        description=(
            "Session-based desk calculator. Each session holds one calculator "
            "whose display is driven by digit, decimal-point and operator key "
            "presses. Arithmetic failures show 'Error' until cleared."
        ),
        version="0.1.0",
    )

    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
