"""
Authentication Router
Endpoints for registration, login, token refresh, logout and sessions.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user, rate_limit
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    LogoutRequest,
    RefreshRequest,
    SessionInfo,
    SessionList,
    TokenPair,
)
from app.schemas.common import MessageResponse
from app.schemas.user import UserCreate, UserLogin, UserResponse
from app.services import auth_service, token_service, user_service
from app.services.rate_limit_service import client_ip
from app.services.token_service import IssuedToken

logger = logging.getLogger(__name__)

router = APIRouter()


def _fingerprint(request: Request) -> str:
    return auth_service.create_session_fingerprint(
        request.headers.get("user-agent"),
        request.headers.get("accept-language"),
    )


def _device_info(request: Request) -> dict:
    return {"user_agent": request.headers.get("user-agent", "")}


def _token_pair(user: User, issued: IssuedToken) -> dict:
    return {
        "access_token": auth_service.create_access_token(data={"sub": str(user.id), "role": user.role}),
        "expires_in": settings.access_token_expire_minutes * 60,
        "refresh_token": issued.token,
        "refresh_expires_at": issued.expires_at,
    }


async def _start_session(request: Request, db: AsyncSession, user: User) -> dict:
    issued = await token_service.issue(
        db,
        user_id=user.id,
        device_info=_device_info(request),
        fingerprint=_fingerprint(request),
        ip=client_ip(request),
    )
    return {**_token_pair(user, issued), "user": UserResponse.model_validate(user)}


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("account_creation"))],
)
async def register(
    request: Request,
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create an account and log it in.
    Rate limited to 3 accounts per hour per IP.
    """
    user = await user_service.register(
        db,
        email=user_data.email,
        username=user_data.username,
        password=user_data.password,
        full_name=user_data.full_name,
    )
    return await _start_session(request, db, user)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(rate_limit("auth"))])
async def login(
    request: Request,
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate by email or username and start a new token family.
    Failed attempts are rate limited to 5 per 15 minutes per IP.
    """
    user = await user_service.authenticate(db, login_data.email_or_username, login_data.password)
    return await _start_session(request, db, user)


@router.post("/refresh", response_model=TokenPair, dependencies=[Depends(rate_limit("auth"))])
async def refresh(
    request: Request,
    refresh_data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Exchange a refresh token for a new access/refresh pair.
    The presented refresh token cannot be used again.
    """
    rotation = await token_service.rotate(
        db,
        refresh_data.refresh_token,
        fingerprint=_fingerprint(request),
        device_info=refresh_data.device_info,
        ip=client_ip(request),
    )
    return _token_pair(rotation.user, rotation.issued)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    logout_data: LogoutRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Revoke the token family of the presented refresh token."""
    if logout_data.refresh_token:
        family = await token_service.find_family(db, logout_data.refresh_token, user.id)
        if family:
            await token_service.revoke_family(db, family)
    logger.info(f"User {user.id} logged out")
    return {"message": "Logged out successfully"}


@router.post("/logout-all", response_model=MessageResponse)
async def logout_all(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Revoke every active refresh token of the current user."""
    revoked = await token_service.revoke_user_tokens(db, user.id)
    logger.info(f"User {user.id} logged out from {revoked} devices")
    return {"message": f"Logged out from {revoked} devices"}


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.get("/sessions", response_model=SessionList)
async def get_sessions(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Active sessions (unused, unexpired refresh tokens) of the current user."""
    sessions = await token_service.list_sessions(db, user.id)
    return {"sessions": [SessionInfo.model_validate(s) for s in sessions]}
