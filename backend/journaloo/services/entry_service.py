"""
Entry service for entry-related persistence.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from journaloo.core.exceptions import NotFoundError
from journaloo.core.utils import paginate
from journaloo.models.entry import Entry
from journaloo.models.journey import Journey
from journaloo.schemas.entry import EntryCreate

logger = logging.getLogger(__name__)


def create_entry(db: Session, entry_data: EntryCreate) -> Entry:
    """Create a new entry. Callers check that the journey is still open."""
    entry = Entry(
        journey_id=entry_data.journey_id,
        description=entry_data.description,
        coordinates=entry_data.coordinates,
        location=entry_data.location
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def get_entry(db: Session, entry_id: int) -> Entry:
    entry = db.query(Entry).filter(Entry.id == entry_id).first()
    if not entry:
        raise NotFoundError("Entry not found")
    return entry


def get_entry_owner_id(db: Session, entry_id: int) -> int:
    """Return the id of the user owning the entry's journey."""
    row = db.query(Journey.user_id).join(Entry, Entry.journey_id == Journey.id).filter(
        Entry.id == entry_id
    ).first()
    if not row:
        raise NotFoundError("Entry not found")
    return row.user_id


def archive_entry(db: Session, entry_id: int) -> None:
    """Soft-delete an entry."""
    updated = db.query(Entry).filter(
        Entry.id == entry_id,
        Entry.archived.is_(False)
    ).update({Entry.archived: True}, synchronize_session=False)
    db.commit()

    if not updated:
        raise NotFoundError("Entry not found")
    logger.info(f"Archived entry {entry_id}")


def list_entries(db: Session, page: int, journey_id: Optional[int] = None) -> List[Entry]:
    """List visible entries, newest first, optionally for a single journey."""
    query = db.query(Entry).filter(Entry.archived.is_(False))
    if journey_id is not None:
        query = query.filter(Entry.journey_id == journey_id)
    query = query.order_by(Entry.created_at.desc(), Entry.id.desc())
    return paginate(query, page).all()


def update_entry_description(db: Session, entry_id: int, description: Optional[str]) -> Entry:
    entry = get_entry(db, entry_id)
    entry.description = description
    db.commit()
    db.refresh(entry)
    return entry
