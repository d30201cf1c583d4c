"""Account and session operations.

Every mutating call commits before it returns. There is no transaction
spanning the credential check and the session insert, so a store failure
between the two surfaces as a retryable StorageError.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from shared_todos.config import get_settings
from shared_todos.database import storage_errors
from shared_todos.errors import (
    InvalidCredentials,
    PasswordMismatch,
    StorageError,
    UsernameTaken,
    ValidationError,
)
from shared_todos.models import User, UserSession, utcnow
from shared_todos.security import hash_password, new_session_token, verify_password

settings = get_settings()
logger = logging.getLogger(__name__)


def session_lifetime(remember: bool) -> timedelta:
    if remember:
        return timedelta(days=settings.remember_days)
    return timedelta(hours=settings.session_hours)


def create_session(db: Session, user: User, remember: bool = False) -> UserSession:
    """Persist a new session for ``user`` and return it."""
    now = utcnow()
    user_session = UserSession(
        token=new_session_token(),
        user_id=user.id,
        remember=remember,
        created_at=now,
        expires_at=now + session_lifetime(remember),
    )
    with storage_errors(db, "create a session"):
        db.add(user_session)
        db.commit()
        db.refresh(user_session)
    return user_session


def signup(
    db: Session,
    username: str,
    password: str,
    password_confirmation: str,
    remember: bool = False,
) -> tuple[User, UserSession]:
    """Create an account and log it in.

    A mismatched confirmation is reported before any other problem with the input.
    """
    if password != password_confirmation:
        raise PasswordMismatch()
    if not username or not password:
        raise ValidationError("Username and password are required")

    with storage_errors(db, "look up a username"):
        existing = db.exec(select(User).where(User.username == username)).first()
    if existing:
        logger.warning(f"Signup failed: username {username!r} already exists.")
        raise UsernameTaken()

    user = User(username=username, password_hash=hash_password(password))
    with storage_errors(db, "create a user"):
        try:
            db.add(user)
            db.commit()
        except IntegrityError:
            # Lost a race against a concurrent signup for the same name.
            db.rollback()
            logger.warning(f"Signup failed: username {username!r} was taken concurrently.")
            raise UsernameTaken()
        db.refresh(user)
    user_id = user.id
    logger.info(f"User created with ID: {user_id} for username: {username!r}")

    try:
        user_session = create_session(db, user, remember)
    except StorageError:
        # Without a session the account is unusable and would block a retry.
        _discard_user(db, user, user_id)
        raise
    return user, user_session


def _discard_user(db: Session, user: User, user_id: int) -> None:
    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Could not remove user ID {user_id} after a failed signup: {exc}", exc_info=True)
        return
    logger.warning(f"Removed user ID {user_id} after its session could not be created.")


def login(
    db: Session, username: str, password: str, remember: bool = False
) -> tuple[User, UserSession]:
    with storage_errors(db, "look up a user"):
        user = db.exec(select(User).where(User.username == username)).first()

    if not user:
        logger.warning(f"Login failed for unknown user: {username!r}")
        raise InvalidCredentials()
    valid, updated_hash = verify_password(password, user.password_hash)
    if not valid:
        logger.warning(f"Login failed for user: {username!r}")
        raise InvalidCredentials()

    if updated_hash is not None:
        user.password_hash = updated_hash
        with storage_errors(db, "rehash a password"):
            db.add(user)
            db.commit()
        logger.info(f"Password hash upgraded for user ID: {user.id}")

    user_session = create_session(db, user, remember)
    logger.info(f"Login succeeded for user ID: {user.id} (remember={remember})")
    return user, user_session


def logout(db: Session, token: Optional[str]) -> None:
    """Drop the session; unknown or already-removed tokens are fine."""
    if not token:
        return
    with storage_errors(db, "delete a session"):
        result = db.exec(delete(UserSession).where(UserSession.token == token))
        db.commit()
    if result.rowcount:
        logger.info("Session closed.")


def current_user(
    db: Session, token: Optional[str], now: Optional[datetime] = None
) -> Optional[User]:
    """Resolve a session token to its user; None means anonymous.

    Missing, unknown and expired tokens all give None. Only an unreachable
    store raises, as StorageError, so an outage is not mistaken for a guest.
    """
    if not token:
        return None

    with storage_errors(db, "resolve a session"):
        user_session = db.get(UserSession, token)
        if user_session is None:
            return None
        if user_session.is_expired(now):
            db.delete(user_session)
            db.commit()
            return None
        return db.get(User, user_session.user_id)
