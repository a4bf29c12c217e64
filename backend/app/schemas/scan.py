"""
Scan Schemas
Item assessments submitted by the client after the vision service has scored a photo.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

class ScanCreate(BaseModel):
    image_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    item_name: str = Field(..., min_length=1, max_length=255)
    item_category: Optional[str] = Field(None, max_length=100)
    item_brand: Optional[str] = Field(None, max_length=100)
    item_description: Optional[str] = None
    condition_assessment: Optional[str] = None
    price_range: Optional[str] = Field(None, max_length=50)
    platform_prices: Dict[str, Any] = Field(default_factory=dict)
    # Range checked by scan_service so the error carries the field name
    confidence_score: Optional[int] = None
    ai_response: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    scanned_at: Optional[datetime] = None

class ScanUpdate(BaseModel):
    notes: Optional[str] = None

class ScanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    image_url: str
    thumbnail_url: Optional[str] = None
    item_name: str
    item_category: Optional[str] = None
    item_brand: Optional[str] = None
    item_description: Optional[str] = None
    condition_assessment: Optional[str] = None
    price_range: Optional[str] = None
    platform_prices: Dict[str, Any] = {}
    confidence_score: Optional[int] = None
    ai_response: Optional[Dict[str, Any]] = None
    is_favorite: bool
    notes: Optional[str] = None
    scanned_at: datetime
    created_at: datetime
