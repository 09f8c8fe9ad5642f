"""
User model for authentication and user management.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from journaloo.db.base import BaseModel


class User(BaseModel):
    """Account that owns journeys."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Relationships
    journeys = relationship(
        "Journey", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
