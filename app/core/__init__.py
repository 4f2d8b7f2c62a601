"""Core configuration, persistence, security primitives and error types."""

from app.core.config import get_settings, settings
from app.core.database import SessionLocal, get_db

__all__ = ["SessionLocal", "get_settings", "get_db", "settings"]
