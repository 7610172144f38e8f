"""Service container package.

Import config directly where needed:
    from src.config import Settings, settings
"""

__all__ = []
