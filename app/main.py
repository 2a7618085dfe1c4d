"""
FastAPI application entrypoint: lifecycle of the database pool and event
tracker, request logging and router registration.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.config import settings
from app.db.pool import db_pool
from app.features.analytics.api.router import router as analytics_router
from app.features.job_matching.api.router import router as job_matching_router
from app.features.networking.api.router import router as networking_router
from app.features.referrals.api.router import router as referrals_router
from app.infrastructure.observability.logging import get_logger, setup_logging
from app.infrastructure.tracking import EventTracker
from app.routes import health

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the database pool, then the event tracker; stop them in reverse."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    tracker: EventTracker = app.state.event_tracker
    startup_tasks = []

    try:
        logger.info("Initializing database pool")
        await db_pool.initialize()
        startup_tasks.append("database_pool")

        await tracker.initialize()
        startup_tasks.append("event_tracker")

        logger.info("All services initialized successfully", services=startup_tasks)

    except Exception as e:
        logger.error("Failed to initialize services", error=str(e), completed_tasks=startup_tasks)

        if "event_tracker" in startup_tasks:
            await tracker.close()

        if "database_pool" in startup_tasks:
            try:
                await db_pool.close()
            except Exception as cleanup_error:
                logger.error("Error cleaning up database pool", error=str(cleanup_error))

        raise

    yield

    logger.info("Application shutting down")

    # Tracker first so no event writes race the pool shutdown
    await tracker.close()

    try:
        logger.info("Closing database pool")
        await db_pool.close()
    except Exception as e:
        logger.error("Error closing database pool", error=str(e))
    else:
        logger.info("All services closed successfully")


app = FastAPI(
    title="Job Search Tracker",
    description="Networking, referral timing, job matching and pipeline analytics",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.event_tracker = EventTracker(enabled=settings.ANALYTICS_TRACKING_ENABLED)

app.include_router(health.router)
app.include_router(networking_router)
app.include_router(referrals_router)
app.include_router(job_matching_router)
app.include_router(analytics_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    logger.info(
        "HTTP request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
