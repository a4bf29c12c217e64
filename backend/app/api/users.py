"""
Users Router
Endpoints for the current user's account.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import UserResponse, UserUpdate
from app.services import user_service

router = APIRouter()

@router.patch("/me", response_model=UserResponse)
async def update_me(
    update_data: UserUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update profile fields and preferences of the current user.
    """
    return await user_service.update_profile(db, user, update_data.model_dump(exclude_unset=True))

@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete the current account together with its scans and sessions.
    """
    await user_service.delete_user(db, user.id)
    return {"message": "Account deleted"}
