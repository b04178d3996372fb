"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boxoffice.admin.app import setup_admin
from boxoffice.api.errors import install_error_handlers
from boxoffice.api.routes import customers, films, health, reservations, rooms, screenings
from boxoffice.config import settings
from boxoffice.tasks.expiry_job import run_expiry_sweep

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: configure and start the scheduler
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        run_expiry_sweep,
        trigger=IntervalTrigger(minutes=settings.expiry_sweep_minutes),
        id="reservation_expiry_sweep",
        name="Expire overdue pending reservations",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, reservation expiry sweep every {settings.expiry_sweep_minutes} min"
    )

    yield

    # Shutdown: stop the scheduler gracefully
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")


# Create FastAPI app
app = FastAPI(
    title="Box Office API",
    description="Screening scheduling and seat reservations for a multi-room cinema",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
    ],  # Frontend development servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)
setup_admin(app)

# Include routers
app.include_router(health.router)
app.include_router(films.router, prefix="/api", tags=["films"])
app.include_router(rooms.router, prefix="/api", tags=["rooms"])
app.include_router(customers.router, prefix="/api", tags=["customers"])
app.include_router(screenings.router, prefix="/api", tags=["screenings"])
app.include_router(reservations.router, prefix="/api", tags=["reservations"])


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run("boxoffice.main:app", host=settings.api_host, port=settings.api_port)
