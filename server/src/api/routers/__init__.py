"""API routers."""

from . import database

__all__ = ["database"]
