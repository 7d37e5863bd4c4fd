"""Channel service - subscriptions and channel profile statistics"""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from app.models.subscription import Subscription
from app.models.user import User
from app.schemas.channel import ChannelProfile
from app.core.exceptions import BusinessLogicError, UserNotFoundError, ValidationError
import logging

logger = logging.getLogger(__name__)


class ChannelService:
    """Service for channel subscriptions"""

    @staticmethod
    def _get_channel(db: Session, username: str) -> User:
        if not username or not username.strip():
            raise ValidationError("Username is missing", details={"field": "username"})
        channel = db.query(User).filter(User.username == username.strip().lower()).first()
        if not channel:
            raise UserNotFoundError()
        return channel

    @staticmethod
    def subscribe(db: Session, subscriber_id: int, channel_username: str) -> Subscription:
        """
        Subscribe a user to a channel (idempotent)

        Raises:
            UserNotFoundError: Unknown channel
            BusinessLogicError: Subscribing to your own channel
        """
        channel = ChannelService._get_channel(db, channel_username)
        if channel.id == subscriber_id:
            raise BusinessLogicError("You cannot subscribe to your own channel")

        existing = (
            db.query(Subscription)
            .filter(Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel.id)
            .first()
        )
        if existing:
            return existing

        subscription = Subscription(subscriber_id=subscriber_id, channel_id=channel.id)
        db.add(subscription)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent duplicate subscribe
            db.rollback()
            return (
                db.query(Subscription)
                .filter(Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel.id)
                .one()
            )
        db.refresh(subscription)

        logger.info(f"User {subscriber_id} subscribed to channel {channel.username}")
        return subscription

    @staticmethod
    def unsubscribe(db: Session, subscriber_id: int, channel_username: str) -> bool:
        """Remove a subscription. Returns False if there was none."""
        channel = ChannelService._get_channel(db, channel_username)
        deleted = (
            db.query(Subscription)
            .filter(Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel.id)
            .delete(synchronize_session=False)
        )
        db.commit()

        if deleted:
            logger.info(f"User {subscriber_id} unsubscribed from channel {channel.username}")
        return bool(deleted)

    @staticmethod
    def get_channel_profile(
        db: Session,
        username: str,
        viewer_id: Optional[int] = None
    ) -> ChannelProfile:
        """
        Channel profile with subscription statistics

        Args:
            db: Database session
            username: Channel owner's username
            viewer_id: Requesting user, None for anonymous viewers

        Returns:
            Profile with subscriber count, subscribed-to count and whether
            the viewer is subscribed
        """
        channel = ChannelService._get_channel(db, username)

        subscribers_count = (
            db.query(func.count(Subscription.id))
            .filter(Subscription.channel_id == channel.id)
            .scalar()
        )
        subscribed_to_count = (
            db.query(func.count(Subscription.id))
            .filter(Subscription.subscriber_id == channel.id)
            .scalar()
        )
        is_subscribed = False
        if viewer_id is not None:
            is_subscribed = (
                db.query(Subscription.id)
                .filter(Subscription.channel_id == channel.id, Subscription.subscriber_id == viewer_id)
                .first()
                is not None
            )

        return ChannelProfile(
            id=channel.id,
            username=channel.username,
            full_name=channel.full_name,
            email=channel.email,
            avatar_url=channel.avatar_url,
            cover_image_url=channel.cover_image_url,
            subscribers_count=subscribers_count or 0,
            channels_subscribed_to_count=subscribed_to_count or 0,
            is_subscribed=is_subscribed,
        )


channel_service = ChannelService()
