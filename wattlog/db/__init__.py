"""
Database package for SQLAlchemy models and session management.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-007)

TODO:
- None
"""

from wattlog.db.models import Base, DailyUsageDocument
from wattlog.db.session import create_engine, create_session_factory, init_schema

__all__ = [
    "Base",
    "DailyUsageDocument",
    "create_engine",
    "create_session_factory",
    "init_schema",
]
