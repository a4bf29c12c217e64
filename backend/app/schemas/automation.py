from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict

class AutomationRunResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    total_processed: int
    total_skipped: int
    total_errors: int
    stats_json: Optional[Dict[str, Any]] = None
    created_at: datetime

class AutomationErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    subreddit: str
    post_id: str
    title: Optional[str] = None
    error_message: Optional[str] = None
    resolved: bool
    created_at: datetime
    resolved_at: Optional[datetime] = None
