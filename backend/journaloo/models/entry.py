"""
Entry model for journal notes inside a journey.
"""
from sqlalchemy import Column, String, Text, Boolean, ForeignKey, Integer
from sqlalchemy.orm import relationship
from journaloo.db.base import BaseModel


class Entry(BaseModel):
    """Journal note. The optional image lives in object storage, keyed by id."""
    __tablename__ = "entries"

    journey_id = Column(Integer, ForeignKey("journeys.id", ondelete="CASCADE"), nullable=False, index=True)
    archived = Column(Boolean, default=False, nullable=False)
    description = Column(Text, nullable=True)
    coordinates = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)

    # Relationships
    journey = relationship("Journey", back_populates="entries")
