from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class BaseResponse(BaseModel):
    """Base response model."""
    success: bool = True

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None

class MessageResponse(BaseResponse):
    message: str

class PaginatedResponse(BaseResponse, Generic[T]):
    """Standard pagination response."""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int
