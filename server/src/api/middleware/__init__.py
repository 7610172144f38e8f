"""API middleware for request processing."""

from .error_handling import setup_error_handlers

__all__ = ["setup_error_handlers"]
