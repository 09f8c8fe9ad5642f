"""
Journey service for journey-related persistence.
"""
import logging
from datetime import datetime
from typing import List
from sqlalchemy.orm import Session
from journaloo.core.exceptions import JourneyClosedError, NotFoundError
from journaloo.core.utils import paginate
from journaloo.models.journey import Journey
from journaloo.schemas.journey import JourneyCreate
from journaloo.services import user_service

logger = logging.getLogger(__name__)


def create_journey(db: Session, user_id: int, journey_data: JourneyCreate) -> Journey:
    """Create a new journey for the user."""
    # Tokens outlive deleted accounts
    user_service.get_user(db, user_id)

    journey = Journey(user_id=user_id, title=journey_data.title)
    if journey_data.start_date is not None:
        journey.start_date = journey_data.start_date
    db.add(journey)
    db.commit()
    db.refresh(journey)
    return journey


def get_journey(db: Session, journey_id: int) -> Journey:
    journey = db.query(Journey).filter(Journey.id == journey_id).first()
    if not journey:
        raise NotFoundError("Journey not found")
    return journey


def get_open_journey(db: Session, journey_id: int, owner_id: int) -> Journey:
    """Return one of the owner's journeys that still accepts entries."""
    journey = get_journey(db, journey_id)
    if journey.user_id != owner_id:
        raise NotFoundError("Journey not found")
    if not journey.is_open:
        raise JourneyClosedError("Journey has already ended")
    return journey


def update_journey(db: Session, journey_id: int, owner_id: int, title: str) -> Journey:
    """Rename one of the owner's journeys."""
    updated = db.query(Journey).filter(
        Journey.id == journey_id,
        Journey.user_id == owner_id
    ).update({Journey.title: title}, synchronize_session=False)
    db.commit()

    if not updated:
        raise NotFoundError("Journey not found")
    return get_journey(db, journey_id)


def end_journey(db: Session, journey_id: int, owner_id: int) -> Journey:
    """
    Set the end timestamp of an ongoing journey.

    Only journeys that are neither archived nor already ended match, so a
    second call for the same journey raises NotFoundError.
    """
    updated = db.query(Journey).filter(
        Journey.id == journey_id,
        Journey.user_id == owner_id,
        Journey.archived.is_(False),
        Journey.end_date.is_(None)
    ).update({Journey.end_date: datetime.utcnow()}, synchronize_session=False)
    db.commit()

    if not updated:
        raise NotFoundError("Journey not found")
    logger.info(f"Ended journey {journey_id}")
    return get_journey(db, journey_id)


def archive_journey(db: Session, journey_id: int, owner_id: int) -> None:
    """Soft-delete one of the owner's journeys."""
    updated = db.query(Journey).filter(
        Journey.id == journey_id,
        Journey.user_id == owner_id,
        Journey.archived.is_(False)
    ).update({Journey.archived: True}, synchronize_session=False)
    db.commit()

    if not updated:
        raise NotFoundError("Journey not found")
    logger.info(f"Archived journey {journey_id}")


def list_journeys_by_user(db: Session, user_id: int, page: int) -> List[Journey]:
    """List a user's visible journeys, most recently started first."""
    query = db.query(Journey).filter(
        Journey.user_id == user_id,
        Journey.archived.is_(False)
    ).order_by(Journey.start_date.desc(), Journey.id.desc())
    return paginate(query, page).all()


def get_active_journey(db: Session, user_id: int) -> Journey:
    """Return the user's most recent journey that has not ended."""
    journey = db.query(Journey).filter(
        Journey.user_id == user_id,
        Journey.archived.is_(False),
        Journey.end_date.is_(None)
    ).order_by(Journey.start_date.desc(), Journey.id.desc()).first()
    if not journey:
        raise NotFoundError("No active journey")
    return journey
