"""SQLAlchemy declarative base shared by every care plan table."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for careplan_db models."""
