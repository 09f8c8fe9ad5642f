"""
Entry routes for journal notes and their images.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status, UploadFile, File
from sqlalchemy.orm import Session
from typing import List, Optional
from journaloo.db.session import get_db
from journaloo.core.config import settings
from journaloo.schemas.entry import EntryCreate, EntryUpdate, EntryResponse
from journaloo.schemas.user import TokenClaims
from journaloo.services import entry_service, journey_service
from journaloo.services.storage_service import StorageClient, get_storage_client
from journaloo.api.dependencies import get_current_user, get_page

router = APIRouter(prefix="/entry", tags=["entries"])


def check_entry_access(entry_id: int, user_id: int, db: Session) -> None:
    """Check that the entry belongs to one of the user's journeys."""
    if entry_service.get_entry_owner_id(db, entry_id) != user_id:
        # Reported as missing so other users' entry ids are not disclosed
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Entry not found"
        )


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_data: EntryCreate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add an entry to one of the caller's open journeys."""
    journey_service.get_open_journey(db, entry_data.journey_id, current_user.id)
    return entry_service.create_entry(db, entry_data)


@router.get("/all", response_model=List[EntryResponse])
async def list_entries(
    page: int = Depends(get_page),
    journey: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Get a page of entries, newest first, optionally for one journey."""
    return entry_service.list_entries(db, page, journey_id=journey)


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(entry_id: int, db: Session = Depends(get_db)):
    """Get entry by ID."""
    return entry_service.get_entry(db, entry_id)


@router.put("/{entry_id}", response_model=EntryResponse)
async def update_entry(
    entry_id: int,
    entry_data: EntryUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the description of one of the caller's entries."""
    check_entry_access(entry_id, current_user.id, db)
    return entry_service.update_entry_description(db, entry_id, entry_data.description)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Archive one of the caller's entries."""
    check_entry_access(entry_id, current_user.id, db)
    entry_service.archive_entry(db, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{entry_id}/image", status_code=status.HTTP_204_NO_CONTENT)
async def upload_entry_image(
    entry_id: int,
    file: UploadFile = File(...),
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client)
):
    """Attach an image to an entry, replacing any previous one."""
    check_entry_access(entry_id, current_user.id, db)

    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type: {file.content_type}"
        )

    # One byte past the limit is enough to tell an oversized upload apart
    content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large (max {settings.MAX_UPLOAD_SIZE} bytes)"
        )

    storage.put_image(entry_id, content, file.content_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{entry_id}/image")
async def get_entry_image(
    entry_id: int,
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client)
):
    """Download an entry's image."""
    entry_service.get_entry(db, entry_id)
    image = storage.get_image(entry_id)
    return Response(content=image.data, media_type=image.content_type)
