from sqlalchemy.ext.asyncio import AsyncSession
from app.schemas import BookingCreate
from app.db.models.booking import Booking
from app.db.repositories import create_booking as db_create_booking


class BookingService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_booking(self, payload: BookingCreate) -> Booking:
        return await db_create_booking(self.session, payload.event_id, payload.email)
