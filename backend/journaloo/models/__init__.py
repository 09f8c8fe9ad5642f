"""Models package - Import all models for SQLAlchemy registration."""
from journaloo.models.user import User
from journaloo.models.journey import Journey
from journaloo.models.entry import Entry

__all__ = [
    "User",
    "Journey",
    "Entry",
]
