"""Core app configuration, database and errors."""

from pictura.core.config import get_settings, settings
from pictura.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
