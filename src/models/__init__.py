from src.models.base import BaseModel
from .user import User
from .activity_log import ActivityLog
from .email_log import EmailLog

__all__ = [
    "BaseModel",
    "User",
    "ActivityLog",
    "EmailLog",
]
