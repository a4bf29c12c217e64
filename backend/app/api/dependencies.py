"""
API Dependencies
Reusable FastAPI dependencies for endpoint protection.
"""

import uuid
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.exceptions import ForbiddenError, NotAuthenticatedError
from app.models.user import User
from app.services import auth_service, user_service
from app.services.automation_tracker import AutomationTracker, create_session_factory
from app.services.rate_limit_service import EndpointLimiter

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Extract user from the Bearer access token.
    Returns None if token is missing or invalid, or the user is inactive.
    """
    if not credentials:
        return None

    payload = auth_service.decode_access_token(credentials.credentials)
    if not payload:
        return None

    try:
        user_id = uuid.UUID(payload.get("sub", ""))
    except ValueError:
        return None

    return await user_service.get_active_user(db, user_id)


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """
    Dependency that enforces authentication.
    Always requires a valid user - use get_current_user_optional for public endpoints.
    """
    if not user:
        raise NotAuthenticatedError()
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError()
    return user


def rate_limit(scope: str):
    """Apply the application's limiter for an endpoint class."""
    async def dependency(request: Request):
        limiter: EndpointLimiter = request.app.state.rate_limiters[scope]
        async with limiter.guard(request):
            yield
    return dependency


@lru_cache()
def get_automation_tracker() -> AutomationTracker:
    return AutomationTracker(create_session_factory(settings.automation_database_url))
