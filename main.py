import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from job_tracker.core.config import settings
from job_tracker.core.database import Storage, get_storage
from job_tracker.core.logging_config import setup_logging
from job_tracker.api.endpoints import jobs, stats, health

setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up Job Tracker API...")
    if app.state.storage is None:
        app.state.storage = get_storage()
    else:
        app.state.storage.init_schema()
    logger.info(f"Database ready at {app.state.storage.url}")

    yield

    # Shutdown
    logger.info("Shutting down Job Tracker API...")


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    """
    Build the application.

    Args:
        storage: Storage handle to serve from. When omitted the process-wide
            handle from get_storage() is opened at startup.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Personal job application tracker",
        lifespan=lifespan
    )
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(jobs.router, prefix=settings.API_PREFIX)
    app.include_router(stats.router, prefix=settings.API_PREFIX)
    app.include_router(health.router)

    @app.get("/")
    async def root():
        """Root endpoint - API health check"""
        return {
            "message": "Job Tracker API",
            "version": "1.0.0",
            "status": "healthy"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
