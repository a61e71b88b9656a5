from fastapi import APIRouter, Depends, status
from app.schemas import BookingCreate, BookingOut, BookingEnvelope, MessageOut
from app.db.session import get_session
from app.services.booking_service import BookingService
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_booking_service(session: AsyncSession = Depends(get_session)) -> BookingService:
    return BookingService(session)


@router.post(
    "",
    response_model=BookingEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageOut}},
)
async def create_booking_endpoint(
    payload: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service)
):
    """
    Book an event by email.

    Fails with 400 when the email is malformed or ``eventId`` does not
    reference an existing event.
    """
    booking = await booking_service.create_booking(payload)
    return BookingEnvelope(booking=BookingOut.model_validate(booking))
