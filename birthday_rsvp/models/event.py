"""Event and RSVP models for birthday parties."""

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from birthday_rsvp.models.base import Base, TimestampMixin, utcnow


class Event(Base, TimestampMixin):
    """A birthday party created by an organizer."""

    __tablename__ = "events"
    id = Column(Integer, primary_key=True)
    parent_email = Column(String(255), nullable=False)
    child_name = Column(String(255), nullable=False)
    age_turning = Column(Integer, nullable=False)
    event_date = Column(DateTime, nullable=False)  # naive UTC
    description = Column(Text, nullable=False)
    interests = Column(JSON, nullable=False, default=list)
    admin_token = Column(String(64), unique=True, nullable=False, index=True)
    guest_token = Column(String(64), unique=True, nullable=False, index=True)

    rsvps = relationship(
        "RSVP",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RSVP.created_at",
    )

    def __repr__(self):
        return f"<Event {self.child_name} turning {self.age_turning} - {self.event_date}>"


class RSVP(Base):
    """A guest's response to an event."""

    __tablename__ = "rsvps"
    __table_args__ = (
        UniqueConstraint("event_id", "parent_email", name="uq_rsvps_event_parent_email"),
    )

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_email = Column(String(255), nullable=False)
    child_name = Column(String(255), nullable=False)
    child_birth_month = Column(String(20), nullable=False)
    receive_updates = Column(Boolean, default=True, nullable=False)
    attending = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", back_populates="rsvps")

    def __repr__(self):
        return f"<RSVP {self.child_name} ({self.parent_email}) -> event {self.event_id}>"
