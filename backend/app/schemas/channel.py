"""Channel profile schemas"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class ChannelProfile(BaseModel):
    """Public channel view with subscription statistics"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: str
    email: str
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    subscribers_count: int = 0
    channels_subscribed_to_count: int = 0
    is_subscribed: bool = False


class SubscriptionResponse(BaseModel):
    """Result of a subscribe/unsubscribe call"""
    channel: str
    subscribed: bool
