"""Error handling middleware and exception handlers."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.api.routers.database import DatabaseNotConfiguredError

logger = logging.getLogger(__name__)


def setup_error_handlers(app: FastAPI) -> None:
    """Set up global error handlers for the FastAPI app.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(DatabaseNotConfiguredError)
    async def database_not_configured_handler(
        request: Request, exc: DatabaseNotConfiguredError
    ) -> JSONResponse:
        """Report missing database settings as a temporary unavailability.

        Args:
            request: The request that caused the error.
            exc: The DatabaseNotConfiguredError exception.

        Returns:
            JSON response with error details.
        """
        logger.warning(f"Database not configured: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "Database not configured",
                "detail": str(exc),
                "type": "DatabaseNotConfiguredError",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle general exceptions.

        Args:
            request: The request that caused the error.
            exc: The exception.

        Returns:
            JSON response with error details.
        """
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": "An unexpected error occurred",
                "type": type(exc).__name__,
            },
        )
