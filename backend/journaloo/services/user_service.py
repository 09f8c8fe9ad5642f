"""
User service: persistence operations and account workflows for users.
"""
import logging
import secrets
from dataclasses import dataclass, field
from typing import List
from email_validator import EmailNotValidError, validate_email
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from journaloo.core.exceptions import DuplicateError, NotFoundError
from journaloo.core.security import get_password_hash
from journaloo.core.utils import paginate
from journaloo.models.entry import Entry
from journaloo.models.journey import Journey
from journaloo.models.user import User
from journaloo.schemas.user import UserCreate, UserUpdate
from journaloo.services.mail_service import Mailer

logger = logging.getLogger(__name__)

TEMPORARY_PASSWORD_BYTES = 12


def _check_unique(db: Session, username: str = None, email: str = None, exclude_id: int = None):
    """Raise DuplicateError when another user already holds the username or email."""
    conditions = []
    if username is not None:
        conditions.append(User.username == username)
    if email is not None:
        conditions.append(User.email == email)
    if not conditions:
        return

    query = db.query(User).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    existing = query.first()
    if existing is None:
        return
    if username is not None and existing.username == username:
        raise DuplicateError("Username already exists")
    raise DuplicateError("Email already exists")


def _commit_unique(db: Session):
    """Commit, reporting a unique index violation as a duplicate."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Another request inserted the same username/email after our check
        raise DuplicateError("Username or email already exists")


def create_user(db: Session, user_data: UserCreate) -> User:
    """Create a user after checking username and email are free."""
    _check_unique(db, username=user_data.username, email=user_data.email)

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password)
    )
    db.add(new_user)
    _commit_unique(db)
    db.refresh(new_user)

    logger.info(f"Created user {new_user.id} ({new_user.username})")
    return new_user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_by_username(db: Session, username: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def normalize_email(email: str) -> str:
    """
    Normalize an address the way EmailStr does on signup (domain lowercased).

    An address that does not validate cannot belong to any user.
    """
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        raise NotFoundError("User not found")


def get_user_by_email(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def list_users(db: Session, page: int) -> List[User]:
    """List users, newest first."""
    query = db.query(User).order_by(User.created_at.desc(), User.id.desc())
    return paginate(query, page).all()


def update_user(db: Session, user_id: int, user_data: UserUpdate) -> User:
    """Apply a partial profile update."""
    user = get_user(db, user_id)

    username = user_data.username if user_data.username != user.username else None
    email = user_data.email if user_data.email != user.email else None
    _check_unique(db, username=username, email=email, exclude_id=user.id)

    if username is not None:
        user.username = username
    if email is not None:
        user.email = email
    if user_data.password is not None:
        user.hashed_password = get_password_hash(user_data.password)

    _commit_unique(db)
    db.refresh(user)
    return user


@dataclass
class AccountDeletion:
    """Rows removed by an account deletion, plus the entries whose images go too."""
    journeys: int
    entries: int
    entry_ids: List[int] = field(default_factory=list)


def delete_user(db: Session, user_id: int) -> AccountDeletion:
    """
    Delete a user together with all of their journeys and entries.

    Everything happens in one transaction so a failure part way through
    leaves the account untouched.
    """
    try:
        user = get_user(db, user_id)

        journey_ids = [
            row.id for row in db.query(Journey.id).filter(Journey.user_id == user.id).all()
        ]

        entry_ids = []
        entries_deleted = 0
        journeys_deleted = 0
        if journey_ids:
            entry_ids = [
                row.id for row in db.query(Entry.id).filter(Entry.journey_id.in_(journey_ids)).all()
            ]
            entries_deleted = db.query(Entry).filter(
                Entry.journey_id.in_(journey_ids)
            ).delete(synchronize_session=False)
            journeys_deleted = db.query(Journey).filter(
                Journey.id.in_(journey_ids)
            ).delete(synchronize_session=False)

        db.query(User).filter(User.id == user.id).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Deleted user {user_id} with {journeys_deleted} journeys and {entries_deleted} entries"
    )
    return AccountDeletion(journeys=journeys_deleted, entries=entries_deleted, entry_ids=entry_ids)


async def reset_password(db: Session, email: str, mailer: Mailer) -> None:
    """
    Replace the user's password with a random temporary one and email it.

    The new password is only committed once the email has been handed to the
    provider.
    """
    user = get_user_by_email(db, normalize_email(email))
    temporary_password = secrets.token_urlsafe(TEMPORARY_PASSWORD_BYTES)

    user.hashed_password = get_password_hash(temporary_password)
    try:
        db.flush()
        await mailer.send(
            to=user.email,
            subject="Your Journaloo password was reset",
            body=(
                f"Hi {user.username},\n\n"
                f"Your temporary password is: {temporary_password}\n\n"
                "Log in with it and choose a new password from your profile."
            ),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Password reset for user {user.id}")
