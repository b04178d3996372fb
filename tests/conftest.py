"""Shared test fixtures."""

import pytest
from fastapi import FastAPI

from boxoffice.api.errors import install_error_handlers
from boxoffice.api.routes import customers, films, health, reservations, rooms, screenings


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal FastAPI app without the APScheduler lifespan or admin, for API tests."""
    app = FastAPI()
    install_error_handlers(app)
    app.include_router(health.router)
    app.include_router(films.router, prefix="/api")
    app.include_router(rooms.router, prefix="/api")
    app.include_router(customers.router, prefix="/api")
    app.include_router(screenings.router, prefix="/api")
    app.include_router(reservations.router, prefix="/api")
    return app
