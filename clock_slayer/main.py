"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from clock_slayer.config import settings
from clock_slayer.database import database
from clock_slayer.logging_config import configure_logging
from clock_slayer.routers import mileage_entries, projects, reports, time_entries
from clock_slayer.services.delivery import ResendDelivery
from clock_slayer.services.report_service import ReportPipeline
from clock_slayer.services.scheduler import ReportScheduler, WeeklySchedule

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    configure_logging(settings.log_level)
    await database.connect()
    await database.ensure_indexes()

    app.state.report_pipeline = ReportPipeline(database.db, ResendDelivery.from_settings())
    scheduler = ReportScheduler(app.state.report_pipeline, WeeklySchedule.from_settings())
    if settings.report_scheduler_enabled:
        scheduler.start()
    else:
        logger.info("Weekly report scheduler disabled")

    logger.info("Clock Slayer backend running on port %s", settings.api_port)
    yield
    # Shutdown
    await scheduler.stop()
    await database.disconnect()


app = FastAPI(
    title="Clock Slayer API",
    description="Time and mileage tracking with a weekly CSV report",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(projects.router)
app.include_router(time_entries.router)
app.include_router(mileage_entries.router)
app.include_router(reports.router)


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    """Record store failures on CRUD endpoints."""
    logger.error("Record store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Record store unavailable"},
    )


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Clock Slayer API"}


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clock_slayer.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
