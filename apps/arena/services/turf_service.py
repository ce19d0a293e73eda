"""
Turf service: venue catalog, slot availability and bookings.

A booking reserves one fixed time slot on one turf for one date. Availability
is computed from the slots already booked for that (turf, date) pair; the
bookings unique constraint settles races between two athletes confirming the
same open slot at once.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from arena.database.models import Turf, Booking, BookingStatus, NotificationType, Sport
from arena.services import notification_service
from arena.utils.constants import TIME_SLOTS, SPORT_IMAGES, DEFAULT_SPORT_IMAGE
from arena.utils.datetime_utils import today, parse_date, format_long_date
from arena.utils.db_errors import is_unique_violation
import logging

logger = logging.getLogger(__name__)


# --- Custom exceptions ---


class TurfNotFoundError(ValueError):
    """Raised when a turf id does not match any record."""


class BookingNotFoundError(ValueError):
    """Raised when a booking id does not match any record."""


class InvalidTimeSlotError(ValueError):
    """Raised when a requested slot is not one of TIME_SLOTS."""


class SlotUnavailableError(ValueError):
    """Raised when the requested slot is already booked."""


class NotAuthorizedError(ValueError):
    """Raised when a user tries to modify a booking they do not own."""


def _money(value) -> float:
    if value is None:
        return 0.0
    return float(value)


def display_image_url(turf: Turf) -> str:
    """Turf image, falling back to a stock image for its sport."""
    sport = Sport(turf.sport).value if turf.sport else None
    return turf.image_url or SPORT_IMAGES.get(sport) or DEFAULT_SPORT_IMAGE


def turf_to_dict(turf: Turf) -> Dict:
    """Serialize a Turf row."""
    return {
        "id": turf.id,
        "name": turf.name,
        "location": turf.location,
        "hourly_rate": _money(turf.hourly_rate),
        "sport": Sport(turf.sport).value,
        "description": turf.description,
        "image_url": turf.image_url,
        "display_image_url": display_image_url(turf),
        "created_at": turf.created_at.isoformat() if turf.created_at else None,
    }


def _booking_to_dict(booking: Booking, turf: Optional[Turf] = None) -> Dict:
    booking_dict = {
        "id": booking.id,
        "user_id": booking.user_id,
        "turf_id": booking.turf_id,
        "booking_date": booking.booking_date.isoformat(),
        "time_slot": booking.time_slot,
        "status": booking.status,
        "created_at": booking.created_at.isoformat() if booking.created_at else None,
    }
    if turf is not None:
        booking_dict["turf"] = {
            "name": turf.name,
            "location": turf.location,
            "hourly_rate": _money(turf.hourly_rate),
        }
    return booking_dict


def _validate_booking_date(booking_date: date) -> None:
    if booking_date < today():
        raise ValueError("Cannot book a date in the past")


# ---------------------------------------------------------------------------
# Turf catalog
# ---------------------------------------------------------------------------


async def list_turfs(session: AsyncSession, sport: Optional[str] = None) -> List[Dict]:
    """
    List turfs ordered by name.

    Args:
        session: Database session
        sport: Optional Sport value to filter by

    Returns:
        List of turf dicts
    """
    query = select(Turf)
    if sport:
        query = query.where(Turf.sport == Sport(sport))
    query = query.order_by(Turf.name, Turf.id)
    result = await session.execute(query)
    return [turf_to_dict(t) for t in result.scalars().all()]


async def _get_turf_row(session: AsyncSession, turf_id: int) -> Turf:
    result = await session.execute(select(Turf).where(Turf.id == turf_id))
    turf = result.scalar_one_or_none()
    if not turf:
        raise TurfNotFoundError(f"Turf {turf_id} not found")
    return turf


async def get_turf(session: AsyncSession, turf_id: int) -> Dict:
    """
    Get a single turf.

    Raises:
        TurfNotFoundError: If the turf does not exist
    """
    return turf_to_dict(await _get_turf_row(session, turf_id))


async def create_turf(
    session: AsyncSession,
    name: str,
    location: str,
    hourly_rate: Union[float, Decimal] = 0,
    sport: str = Sport.FOOTBALL.value,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Dict:
    """
    Create a turf (admin).

    Raises:
        ValueError: If name/location are blank or hourly_rate is negative
    """
    if not name or not name.strip():
        raise ValueError("Turf name is required")
    if not location or not location.strip():
        raise ValueError("Turf location is required")
    if hourly_rate is None or Decimal(str(hourly_rate)) < 0:
        raise ValueError("Hourly rate must be zero or greater")

    turf = Turf(
        name=name.strip(),
        location=location.strip(),
        hourly_rate=Decimal(str(hourly_rate)),
        sport=Sport(sport),
        description=description,
        image_url=image_url,
    )
    session.add(turf)
    await session.flush()
    await session.refresh(turf)
    logger.info(f"Created turf {turf.id} ({turf.name})")
    return turf_to_dict(turf)


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


async def get_booked_slots(
    session: AsyncSession, turf_id: int, booking_date: Union[str, date]
) -> List[str]:
    """
    Time slots already booked for a (turf, date) pair.

    Returns:
        Booked slot labels, in TIME_SLOTS order
    """
    booking_date = parse_date(booking_date)
    result = await session.execute(
        select(Booking.time_slot).where(
            Booking.turf_id == turf_id,
            Booking.booking_date == booking_date,
        )
    )
    booked = set(result.scalars().all())
    return [slot for slot in TIME_SLOTS if slot in booked]


async def get_availability(
    session: AsyncSession, turf_id: int, booking_date: Union[str, date]
) -> Dict:
    """
    Every slot for a turf on a date, marked booked or open.

    Raises:
        TurfNotFoundError: If the turf does not exist
        ValueError: If the date is malformed or in the past
    """
    booking_date = parse_date(booking_date)
    _validate_booking_date(booking_date)
    await _get_turf_row(session, turf_id)

    booked = set(await get_booked_slots(session, turf_id, booking_date))
    slots = [{"time_slot": slot, "is_booked": slot in booked} for slot in TIME_SLOTS]
    return {
        "turf_id": turf_id,
        "booking_date": booking_date.isoformat(),
        "slots": slots,
        "available_count": sum(1 for s in slots if not s["is_booked"]),
    }


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


async def create_booking(
    session: AsyncSession,
    user_id: int,
    turf_id: int,
    booking_date: Union[str, date],
    time_slot: str,
) -> Dict:
    """
    Book a slot on a turf.

    Reads the booked set first; the unique constraint on
    (turf_id, booking_date, time_slot) rejects a concurrent insert that passed
    the same read.

    Returns:
        Dict with the booking and the confirmation toast text

    Raises:
        InvalidTimeSlotError: If the slot is not offered
        ValueError: If the date is malformed or in the past
        TurfNotFoundError: If the turf does not exist
        SlotUnavailableError: If the slot is already booked
    """
    if time_slot not in TIME_SLOTS:
        raise InvalidTimeSlotError(f"Invalid time slot: {time_slot}")
    booking_date = parse_date(booking_date)
    _validate_booking_date(booking_date)
    turf = await _get_turf_row(session, turf_id)

    if time_slot in await get_booked_slots(session, turf_id, booking_date):
        raise SlotUnavailableError("This time slot is already booked")

    booking = Booking(
        user_id=user_id,
        turf_id=turf_id,
        booking_date=booking_date,
        time_slot=time_slot,
        status=BookingStatus.CONFIRMED.value,
    )
    try:
        async with session.begin_nested():
            session.add(booking)
            await session.flush()
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.info(
                f"Booking race lost for turf {turf_id} on {booking_date} at {time_slot}"
            )
            raise SlotUnavailableError("This time slot is already booked") from e
        raise
    await session.refresh(booking)

    message = (
        f"You've booked {turf.name} for {format_long_date(booking_date)} at {time_slot}"
    )
    await notification_service.notify_quietly(
        session,
        user_id=user_id,
        type=NotificationType.BOOKING_CONFIRMED.value,
        title="Booking Confirmed!",
        message=message,
        data={"booking_id": booking.id, "turf_id": turf_id},
        link_url="/profile?tab=bookings",
    )

    return {"booking": _booking_to_dict(booking, turf), "message": message}


async def list_user_bookings(session: AsyncSession, user_id: int) -> List[Dict]:
    """
    A user's bookings joined with turf name/location/rate, newest date first.
    """
    result = await session.execute(
        select(Booking, Turf)
        .join(Turf, Booking.turf_id == Turf.id)
        .where(Booking.user_id == user_id)
        .order_by(Booking.booking_date.desc(), Booking.id.desc())
    )
    return [_booking_to_dict(booking, turf) for booking, turf in result.all()]


async def cancel_booking(session: AsyncSession, booking_id: int, user_id: int) -> None:
    """
    Cancel (delete) a booking owned by the user, freeing the slot.

    Raises:
        BookingNotFoundError: If the booking does not exist
        NotAuthorizedError: If the booking belongs to someone else
    """
    result = await session.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise BookingNotFoundError(f"Booking {booking_id} not found")
    if booking.user_id != user_id:
        raise NotAuthorizedError("Not authorized to cancel this booking")

    time_slot, booking_date, turf_id = booking.time_slot, booking.booking_date, booking.turf_id
    await session.execute(delete(Booking).where(Booking.id == booking_id))
    await session.flush()
    logger.info(f"User {user_id} cancelled booking {booking_id}")

    await notification_service.notify_quietly(
        session,
        user_id=user_id,
        type=NotificationType.BOOKING_CANCELLED.value,
        title="Booking Cancelled",
        message=f"Your {time_slot} booking on {format_long_date(booking_date)} was cancelled",
        data={"booking_id": booking_id, "turf_id": turf_id},
    )
