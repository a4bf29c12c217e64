"""
Scans Router
Scan submission and per-user scan history.
"""

import math
import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user, rate_limit
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.scan import ScanCreate, ScanResponse, ScanUpdate
from app.services import scan_service
from app.services.scan_service import ScanFilter
from app.utils.dates import to_naive_utc

router = APIRouter()


@router.post(
    "/",
    response_model=ScanResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("scan"))],
)
async def create_scan(
    scan_data: ScanCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Save an assessment returned by the vision service.
    Rate limited to 30 scans per minute per IP.
    """
    return await scan_service.record_scan(db, user.id, scan_data.model_dump(exclude_none=True))


@router.get("/", response_model=PaginatedResponse[ScanResponse])
async def list_scans(
    category: Optional[str] = Query(None, max_length=100),
    favorite_only: bool = False,
    since: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The current user's scans, newest first."""
    items, total = await scan_service.list_scans(
        db,
        user.id,
        ScanFilter(category=category, favorite_only=favorite_only, since=to_naive_utc(since) if since else None),
        page=page,
        page_size=page_size,
    )
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if total else 0,
    }


@router.get("/{scan_id}", response_model=ScanResponse)
async def get_scan(
    scan_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await scan_service.get_scan(db, scan_id, user.id)


@router.post("/{scan_id}/favorite", response_model=ScanResponse)
async def toggle_favorite(
    scan_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await scan_service.toggle_favorite(db, scan_id, user.id)


@router.patch("/{scan_id}", response_model=ScanResponse)
async def update_scan(
    scan_id: uuid.UUID,
    update_data: ScanUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await scan_service.update_notes(db, scan_id, user.id, update_data.notes)


@router.delete("/{scan_id}", response_model=MessageResponse)
async def delete_scan(
    scan_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await scan_service.delete_scan(db, scan_id, user.id)
    return {"message": "Scan deleted successfully"}
