"""
Auth Schemas
Token pairs, refresh requests and session listings.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.user import UserResponse

class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)
    device_info: Optional[Dict[str, Any]] = None

class LogoutRequest(BaseModel):
    refresh_token: Optional[str] = None

class TokenPair(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Access token lifetime in seconds
    refresh_token: str
    refresh_expires_at: datetime

class AuthResponse(TokenPair):
    user: UserResponse

class SessionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    family: str
    fingerprint: Optional[str] = None
    device_info: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    created_at: datetime
    last_used_at: Optional[datetime] = None
    expires_at: datetime

    @field_validator("ip_address", mode="before")
    @classmethod
    def stringify_ip(cls, v: Any) -> Optional[str]:
        # INET columns come back as ipaddress objects on PostgreSQL
        return str(v) if v is not None else None

class SessionList(BaseModel):
    success: bool = True
    sessions: List[SessionInfo]
