"""
Pydantic schemas for Entry entity.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class EntryCreate(BaseModel):
    """Schema for entry creation."""
    journey_id: int
    description: Optional[str] = None
    coordinates: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)


class EntryUpdate(BaseModel):
    """Schema for entry description update."""
    description: Optional[str] = None


class EntryResponse(BaseModel):
    """Schema for entry response."""
    id: int
    journey_id: int
    created_at: datetime
    archived: bool
    description: Optional[str] = None
    coordinates: Optional[str] = None
    location: Optional[str] = None

    class Config:
        from_attributes = True
