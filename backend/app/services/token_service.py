"""
Refresh Token Service
Issues, rotates and revokes opaque refresh tokens.

Every token belongs to a family started at login. Rotation marks the presented
token used and issues its successor in the same family. Presenting a used token
again means the chain was copied, so the whole family is revoked.
"""

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import (
    TokenExpiredError,
    TokenFingerprintError,
    TokenNotFoundError,
    TokenOwnerInactiveError,
    TokenReusedError,
)
from app.models.refresh_token import RefreshToken
from app.models.user import User
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


@dataclass
class IssuedToken:
    token: str
    family: str
    expires_at: datetime


@dataclass
class RotationResult:
    user: User
    issued: IssuedToken


def generate_family() -> str:
    return secrets.token_hex(16)


async def issue(
    db: AsyncSession,
    user_id: uuid.UUID,
    device_info: Optional[dict] = None,
    fingerprint: Optional[str] = None,
    ip: Optional[str] = None,
    family: Optional[str] = None,
) -> IssuedToken:
    """
    Insert a new unused refresh token.
    A new family is started when none is given (first login).
    """
    starts_family = family is None
    issued = IssuedToken(
        token=secrets.token_urlsafe(48),
        family=family or generate_family(),
        expires_at=utcnow() + timedelta(days=settings.refresh_token_ttl_days),
    )
    db.add(RefreshToken(
        user_id=user_id,
        token=issued.token,
        family=issued.family,
        fingerprint=fingerprint,
        device_info=device_info or {},
        ip_address=ip,
        used=False,
        expires_at=issued.expires_at,
    ))
    await db.flush()

    if starts_family:
        await _enforce_session_cap(db, user_id)

    return issued


async def rotate(
    db: AsyncSession,
    presented_token: str,
    fingerprint: Optional[str] = None,
    device_info: Optional[dict] = None,
    ip: Optional[str] = None,
) -> RotationResult:
    """
    Exchange a valid, unused refresh token for its successor.

    The claim on the presented token is a conditional update, so of two
    concurrent rotations of one token exactly one succeeds and the other is
    handled as reuse.
    """
    result = await db.execute(
        select(RefreshToken)
        .where(RefreshToken.token == presented_token)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    record = result.scalar_one_or_none()

    if record is None:
        raise TokenNotFoundError()

    now = utcnow()
    if record.expires_at < now:
        raise TokenExpiredError()

    if record.used:
        await _handle_reuse(db, record.family)

    if fingerprint and record.fingerprint and fingerprint != record.fingerprint:
        logger.warning(f"Refresh token fingerprint mismatch for family {record.family}")
        raise TokenFingerprintError()

    user = await db.get(User, record.user_id)
    if user is None or not user.is_active:
        raise TokenOwnerInactiveError()

    claimed = await db.execute(
        update(RefreshToken)
        .where(RefreshToken.id == record.id, RefreshToken.used == False)  # noqa: E712
        .values(used=True, last_used_at=now)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        await _handle_reuse(db, record.family)

    issued = await issue(
        db,
        user_id=record.user_id,
        device_info=device_info if device_info is not None else record.device_info,
        fingerprint=fingerprint or record.fingerprint,
        ip=ip,
        family=record.family,
    )
    return RotationResult(user=user, issued=issued)


async def _handle_reuse(db: AsyncSession, family: str) -> None:
    """Revoke the family, persist the revocation, then reject the request."""
    revoked = await revoke_family(db, family)
    await db.commit()
    logger.warning(f"Refresh token reuse detected; revoked {revoked} token(s) in family {family}")
    raise TokenReusedError(family)


async def revoke_family(db: AsyncSession, family: str) -> int:
    """Mark every remaining token in the family used with one bulk update."""
    result = await db.execute(
        update(RefreshToken)
        .where(RefreshToken.family == family, RefreshToken.used == False)  # noqa: E712
        .values(used=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def revoke_user_tokens(db: AsyncSession, user_id: uuid.UUID) -> int:
    """Revoke every active token of a user (logout from all devices)."""
    result = await db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user_id, RefreshToken.used == False)  # noqa: E712
        .values(used=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def find_family(db: AsyncSession, presented_token: str, user_id: uuid.UUID) -> Optional[str]:
    """Family of a token, only if it belongs to the user."""
    result = await db.execute(
        select(RefreshToken.family).where(
            RefreshToken.token == presented_token,
            RefreshToken.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def list_sessions(db: AsyncSession, user_id: uuid.UUID) -> List[RefreshToken]:
    """Active (unused, unexpired) tokens of a user, newest first."""
    result = await db.execute(
        select(RefreshToken)
        .where(
            RefreshToken.user_id == user_id,
            RefreshToken.used == False,  # noqa: E712
            RefreshToken.expires_at > utcnow(),
        )
        .order_by(RefreshToken.created_at.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def _enforce_session_cap(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Revoke the oldest active families once a user exceeds the session cap."""
    sessions = await list_sessions(db, user_id)
    overflow = sessions[settings.max_sessions_per_user:]
    for stale in overflow:
        await revoke_family(db, stale.family)
    if overflow:
        logger.info(f"Revoked {len(overflow)} old session(s) for user {user_id}")

