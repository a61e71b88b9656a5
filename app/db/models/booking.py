from sqlalchemy import Column, String, DateTime, Uuid, func, Index
import uuid
from app.db.session import Base


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Checked against events on write (see app.db.hooks), no FK constraint
    event_id = Column(Uuid(as_uuid=True), nullable=False)
    email = Column(String(320), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_booking_event', 'event_id'),
    )
