from sqlalchemy import Column, String, Text, DateTime, JSON, Uuid, func, Index
import uuid
from app.db.session import Base
import enum


class EventMode(str, enum.Enum):
    """Suggested values for Event.mode; the column accepts any non-empty string."""
    online = "online"
    offline = "offline"
    hybrid = "hybrid"


class Event(Base):
    __tablename__ = "events"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String(1024), nullable=False)
    venue = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)    # YYYY-MM-DD
    time = Column(String(11), nullable=False)    # HH:mm or HH:mm-HH:mm
    mode = Column(String(50), nullable=False)
    audience = Column(String(255), nullable=False)
    agenda = Column(JSON, nullable=False)
    organizer = Column(String(255), nullable=False)
    tags = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_event_date', 'date'),
        Index('idx_event_created_at', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<Event {self.slug!r}>"
