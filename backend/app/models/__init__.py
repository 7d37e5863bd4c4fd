"""Database models"""

from app.models.user import User
from app.models.subscription import Subscription

__all__ = ["User", "Subscription"]
