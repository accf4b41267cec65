import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from letsgo.core.security import utcnow
from letsgo.db.base import Base


class Event(Base):
    """Event listing owned by the user who created it."""

    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True, index=True)

    address = Column(String, nullable=True)
    number = Column(String, nullable=True)
    district = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    local = Column(String, nullable=True)

    # Naive UTC
    date = Column(DateTime, nullable=False, index=True)
    hour = Column(String, nullable=True)

    image = Column(JSON, nullable=True)

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="events")
    likes = relationship("Like", back_populates="event", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Event(id={self.id}, title={self.title})>"
