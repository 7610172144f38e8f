"""Main FastAPI application.

This module sets up the FastAPI application served by the Fargate task on
port 3000. The load balancer health check targets the root endpoint.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.middleware import setup_error_handlers
from src.api.routers import database
from src.config import settings

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan (startup and shutdown).

    Args:
        app: FastAPI application instance.
    """
    logger.info(f"Starting {settings.service_name} on port {settings.port}...")
    if settings.database_configured:
        logger.info(f"Database endpoint: {settings.rds_endpoint}:{settings.rds_port}")
    else:
        # The service still answers health checks without a database
        missing = ", ".join(settings.missing_database_settings)
        logger.warning(
            f"Database settings are incomplete (missing {missing}). "
            "Database endpoints will return 503."
        )

    yield

    logger.info(f"Shutting down {settings.service_name}...")


app = FastAPI(
    title=settings.service_name,
    description="Containerised service running on ECS Fargate behind an ALB",
    version=API_VERSION,
    lifespan=lifespan,
)

setup_error_handlers(app)

app.include_router(database.router, prefix="/database", tags=["database"])


@app.get("/")
async def root():
    """Root endpoint, used by the load balancer health check."""
    return {
        "status": "ok",
        "service": settings.service_name,
        "version": API_VERSION,
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# For production, use: uvicorn src.api.api:app --host 0.0.0.0 --port 3000
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "src.api.api:app",
        host="0.0.0.0",
        port=settings.port,
        reload=True,
    )
