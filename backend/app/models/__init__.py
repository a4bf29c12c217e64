"""
Flippi Database Models
Exports all models for use throughout the application.
"""

from app.models.user import User
from app.models.scan import ScanHistory
from app.models.refresh_token import RefreshToken
from app.models.automation import AutomationBase, AutomationRun, AutomationError

__all__ = [
    "User",
    "ScanHistory",
    "RefreshToken",
    "AutomationBase",
    "AutomationRun",
    "AutomationError",
]
