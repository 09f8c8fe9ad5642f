"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    """Base user schema."""
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for user creation."""
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Schema for profile update. Omitted fields are left unchanged."""
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)


class UserInfo(BaseModel):
    """Public user information. Never carries the password hash."""
    id: int
    username: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    """Schema for user login."""
    username: str
    password: str


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"


class TokenClaims(BaseModel):
    """Identity embedded in an access token."""
    id: int
    username: str
    email: str


class DeletionCounts(BaseModel):
    """Rows removed by an account deletion."""
    journeys: int
    entries: int
