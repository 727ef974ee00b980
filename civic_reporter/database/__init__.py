"""Database configuration, models, and session management."""

from civic_reporter.database.config import engine, Base, get_db
from civic_reporter.database import models

__all__ = ["engine", "Base", "get_db", "models"]
