"""
Journey model for a user's trips.
"""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from journaloo.db.base import BaseModel


class Journey(BaseModel):
    """A trip owned by one user. end_date stays NULL while the trip is ongoing."""
    __tablename__ = "journeys"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    archived = Column(Boolean, default=False, nullable=False)
    start_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    end_date = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="journeys")
    entries = relationship(
        "Entry", back_populates="journey", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_open(self) -> bool:
        return not self.archived and self.end_date is None
