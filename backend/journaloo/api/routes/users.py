"""
User routes for signup, login, profile management and password reset.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from journaloo.db.session import get_db
from journaloo.schemas.user import (
    UserCreate, UserUpdate, UserInfo, UserLogin, Token, TokenClaims, DeletionCounts
)
from journaloo.core.security import verify_password, create_user_token
from journaloo.services import user_service
from journaloo.services.mail_service import Mailer, get_mailer
from journaloo.services.storage_service import StorageClient, delete_images, get_storage_client
from journaloo.api.dependencies import get_current_user, get_page

router = APIRouter(prefix="/user", tags=["users"])


@router.post("", response_model=Token, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and return an access token."""
    user = user_service.create_user(db, user_data)
    return {"access_token": create_user_token(user), "token_type": "bearer"}


@router.put("", response_model=Token)
async def update_profile(
    user_data: UserUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the caller's profile. Returns a token carrying the new claims."""
    user = user_service.update_user(db, current_user.id, user_data)
    return {"access_token": create_user_token(user), "token_type": "bearer"}


@router.delete("", response_model=DeletionCounts)
async def delete_account(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client)
):
    """Delete the caller's account with all journeys, entries and entry images."""
    deletion = user_service.delete_user(db, current_user.id)
    delete_images(storage, deletion.entry_ids)
    return DeletionCounts(journeys=deletion.journeys, entries=deletion.entries)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = user_service.get_user_by_username(db, credentials.username)

    if not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password"
        )

    return {"access_token": create_user_token(user), "token_type": "bearer"}


@router.get("/all", response_model=List[UserInfo])
async def list_users(page: int = Depends(get_page), db: Session = Depends(get_db)):
    """Get a page of users, newest first."""
    return user_service.list_users(db, page)


@router.get("/{user_id}", response_model=UserInfo)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get public user info by ID."""
    return user_service.get_user(db, user_id)


@router.put("/{email}/reset", status_code=status.HTTP_202_ACCEPTED)
async def reset_password(
    email: str,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer)
):
    """Email a temporary password to the account registered with this address."""
    await user_service.reset_password(db, email, mailer)
    return {"message": "Password reset email sent"}
