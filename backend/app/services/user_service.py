"""
User Service
Account registration, credential checks, profile updates and deletion.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    ConflictError,
    InactiveUserError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from app.models.user import User
from app.services import auth_service
from app.utils.dates import utcnow
from app.utils.password_policy import validate_password

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("full_name", "profile_picture_url", "preferences")


def _conflicting_field(error: IntegrityError) -> str:
    message = str(error.orig).lower()
    if "username" in message:
        return "username"
    return "email"


async def register(
    db: AsyncSession,
    email: str,
    username: str,
    password: str,
    full_name: Optional[str] = None,
) -> User:
    email = email.strip().lower()
    username = username.strip().lower()

    errors = validate_password(password)
    if errors:
        raise ValidationError("password", "; ".join(errors))

    existing = await db.execute(
        select(User).where(or_(User.email == email, User.username == username))
    )
    found = existing.scalars().first()
    if found:
        raise ConflictError("email" if found.email == email else "username")

    user = User(
        email=email,
        username=username,
        password_hash=auth_service.get_password_hash(password),
        full_name=full_name,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        raise ConflictError(_conflicting_field(e)) from e

    logger.info(f"Registered user {user.id}")
    return user


async def authenticate(db: AsyncSession, identifier: str, password: str) -> User:
    """Look up by email or username and verify the password."""
    identifier = identifier.strip().lower()
    result = await db.execute(
        select(User).where(or_(User.email == identifier, User.username == identifier))
    )
    user = result.scalar_one_or_none()

    if not user or not auth_service.verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError()

    if not user.is_active:
        raise InactiveUserError()

    user.last_login_at = utcnow()
    await db.flush()
    return user


async def get_active_user(db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.id == user_id, User.is_active == True)  # noqa: E712
    )
    return result.scalar_one_or_none()


async def update_profile(db: AsyncSession, user: User, changes: dict) -> User:
    for field in PROFILE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(user, field, changes[field])
    await db.flush()
    await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Delete a user; scans and refresh tokens go with it via ON DELETE CASCADE."""
    result = await db.execute(delete(User).where(User.id == user_id))
    if result.rowcount == 0:
        raise NotFoundError("User")
    logger.info(f"Deleted user {user_id}")
