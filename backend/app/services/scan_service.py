"""
Scan History Service
Persists and queries AI-derived item assessments. Every read and write is
scoped to the owning user.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, ValidationError
from app.models.scan import CONFIDENCE_MAX, CONFIDENCE_MIN, ScanHistory
from app.utils.dates import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

SCAN_FIELDS = (
    "image_url",
    "thumbnail_url",
    "item_name",
    "item_category",
    "item_brand",
    "item_description",
    "condition_assessment",
    "price_range",
    "platform_prices",
    "confidence_score",
    "ai_response",
    "is_favorite",
    "notes",
    "scanned_at",
)


@dataclass
class ScanFilter:
    category: Optional[str] = None
    favorite_only: bool = False
    since: Optional[datetime] = None


def validate_confidence(score: Optional[int]) -> None:
    if score is None:
        return
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError("confidence_score", "Confidence score must be an integer")
    if not CONFIDENCE_MIN <= score <= CONFIDENCE_MAX:
        raise ValidationError(
            "confidence_score",
            f"Confidence score must be between {CONFIDENCE_MIN} and {CONFIDENCE_MAX}",
        )


async def record_scan(db: AsyncSession, user_id: uuid.UUID, item_data: dict) -> ScanHistory:
    validate_confidence(item_data.get("confidence_score"))
    if not item_data.get("item_name"):
        raise ValidationError("item_name", "Item name is required")
    if not item_data.get("image_url"):
        raise ValidationError("image_url", "Image URL is required")

    values = {k: item_data[k] for k in SCAN_FIELDS if item_data.get(k) is not None}
    values["scanned_at"] = to_naive_utc(values["scanned_at"]) if "scanned_at" in values else utcnow()
    values.setdefault("platform_prices", {})

    scan = ScanHistory(user_id=user_id, **values)
    db.add(scan)
    await db.flush()
    await db.refresh(scan)
    return scan


def _owned(scan_id: uuid.UUID, user_id: uuid.UUID):
    return select(ScanHistory).where(ScanHistory.id == scan_id, ScanHistory.user_id == user_id)


async def get_scan(db: AsyncSession, scan_id: uuid.UUID, user_id: uuid.UUID) -> ScanHistory:
    result = await db.execute(_owned(scan_id, user_id))
    scan = result.scalar_one_or_none()
    if scan is None:
        raise NotFoundError("Scan")
    return scan


async def list_scans(
    db: AsyncSession,
    user_id: uuid.UUID,
    scan_filter: Optional[ScanFilter] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[ScanHistory], int]:
    """A page of the user's scans, newest first, and the total match count."""
    scan_filter = scan_filter or ScanFilter()
    conditions = [ScanHistory.user_id == user_id]
    if scan_filter.category:
        conditions.append(ScanHistory.item_category == scan_filter.category)
    if scan_filter.favorite_only:
        conditions.append(ScanHistory.is_favorite == True)  # noqa: E712
    if scan_filter.since:
        conditions.append(ScanHistory.scanned_at >= scan_filter.since)

    total = await db.scalar(select(func.count(ScanHistory.id)).where(*conditions))

    result = await db.execute(
        select(ScanHistory)
        .where(*conditions)
        .order_by(ScanHistory.scanned_at.desc(), ScanHistory.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total or 0


async def toggle_favorite(db: AsyncSession, scan_id: uuid.UUID, user_id: uuid.UUID) -> ScanHistory:
    scan = await get_scan(db, scan_id, user_id)
    scan.is_favorite = not scan.is_favorite
    await db.flush()
    await db.refresh(scan)
    return scan


async def update_notes(
    db: AsyncSession, scan_id: uuid.UUID, user_id: uuid.UUID, notes: Optional[str]
) -> ScanHistory:
    scan = await get_scan(db, scan_id, user_id)
    scan.notes = notes
    await db.flush()
    await db.refresh(scan)
    return scan


async def delete_scan(db: AsyncSession, scan_id: uuid.UUID, user_id: uuid.UUID) -> None:
    scan = await get_scan(db, scan_id, user_id)
    await db.delete(scan)
    await db.flush()
