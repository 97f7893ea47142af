"""Database package."""
from hackdesk.db.session import engine, SessionLocal, get_db
from hackdesk.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "Base"]
