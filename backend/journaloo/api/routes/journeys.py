"""
Journey management routes.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from journaloo.db.session import get_db
from journaloo.schemas.journey import JourneyCreate, JourneyUpdate, JourneyResponse
from journaloo.schemas.user import TokenClaims
from journaloo.services import journey_service
from journaloo.api.dependencies import get_current_user, get_page

router = APIRouter(prefix="/journey", tags=["journeys"])


@router.post("", response_model=JourneyResponse, status_code=status.HTTP_201_CREATED)
async def create_journey(
    journey_data: JourneyCreate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Start a new journey for the caller."""
    return journey_service.create_journey(db, current_user.id, journey_data)


@router.put("", response_model=JourneyResponse)
async def update_journey(
    journey_data: JourneyUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rename one of the caller's journeys."""
    return journey_service.update_journey(
        db, journey_data.id, current_user.id, journey_data.title
    )


@router.get("/user/{user_id}", response_model=List[JourneyResponse])
async def list_user_journeys(
    user_id: int,
    page: int = Depends(get_page),
    db: Session = Depends(get_db)
):
    """Get a page of a user's journeys, most recent first."""
    return journey_service.list_journeys_by_user(db, user_id, page)


@router.get("/{user_id}/active", response_model=JourneyResponse)
async def get_active_journey(user_id: int, db: Session = Depends(get_db)):
    """Get the user's current open journey."""
    return journey_service.get_active_journey(db, user_id)


@router.get("/{journey_id}", response_model=JourneyResponse)
async def get_journey(journey_id: int, db: Session = Depends(get_db)):
    """Get journey by ID."""
    return journey_service.get_journey(db, journey_id)


@router.delete("/{journey_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_journey(
    journey_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Archive one of the caller's journeys."""
    journey_service.archive_journey(db, journey_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{journey_id}/end", response_model=JourneyResponse)
async def end_journey(
    journey_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark one of the caller's journeys as ended."""
    return journey_service.end_journey(db, journey_id, current_user.id)
