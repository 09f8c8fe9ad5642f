"""
Pydantic schemas for Journey entity.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class JourneyCreate(BaseModel):
    """Schema for journey creation. start_date defaults to now."""
    title: str = Field(..., min_length=1, max_length=200)
    start_date: Optional[datetime] = None


class JourneyUpdate(BaseModel):
    """Schema for journey title update."""
    id: int
    title: str = Field(..., min_length=1, max_length=200)


class JourneyResponse(BaseModel):
    """Schema for journey response."""
    id: int
    user_id: int
    title: str
    archived: bool
    start_date: datetime
    end_date: Optional[datetime] = None

    class Config:
        from_attributes = True
