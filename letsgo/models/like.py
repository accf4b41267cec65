import uuid

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from letsgo.core.security import utcnow
from letsgo.db.base import Base


class Like(Base):
    """A user's like on an event. At most one row per (user, event)."""

    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_likes_user_event"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Uuid, ForeignKey("events.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="likes")
    event = relationship("Event", back_populates="likes")
