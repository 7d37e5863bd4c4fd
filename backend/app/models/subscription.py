"""Channel subscription model"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Subscription(Base):
    """A user (subscriber) following another user's channel"""

    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    subscriber_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    channel_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    subscriber = relationship("User", foreign_keys=[subscriber_id], back_populates="subscriptions")
    channel = relationship("User", foreign_keys=[channel_id], back_populates="subscribers")

    __table_args__ = (
        UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscriber_channel'),
        Index('idx_subscriptions_channel', 'channel_id'),
        CheckConstraint('subscriber_id <> channel_id', name='chk_no_self_subscription'),
    )

    def __repr__(self):
        return f"<Subscription(subscriber_id={self.subscriber_id}, channel_id={self.channel_id})>"
