"""
Unit tests for turf service.

Tests the catalog, slot availability, booking creation (including the
double-booking guard) and owner-only cancellation.
"""

from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy import select, text

from arena.database.models import Booking, Notification, Turf
from arena.services import turf_service, user_service
from arena.utils.constants import TIME_SLOTS, SPORT_IMAGES
from arena.utils.datetime_utils import today


async def _create_athlete(db_session, email, name="Test Athlete"):
    """Helper: create a user with profile, return user_id (flush only)."""
    return await user_service.create_user_with_profile(
        db_session, email=email, password_hash="hash", name=name, primary_sport="football"
    )


@pytest_asyncio.fixture
async def athletes(db_session):
    alice = await _create_athlete(db_session, "alice@example.com", "Alice")
    bob = await _create_athlete(db_session, "bob@example.com", "Bob")
    return {"alice": alice, "bob": bob}


@pytest_asyncio.fixture
async def turf(db_session):
    return await turf_service.create_turf(
        db_session, name="Downtown Arena", location="123 Main St", hourly_rate=50
    )


@pytest.fixture
def tomorrow():
    return today() + timedelta(days=1)


# ──────────────────────────────────────────────────────────────
# Catalog
# ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_turf_defaults(db_session, turf):
    assert turf["id"] > 0
    assert turf["hourly_rate"] == 50.0
    assert turf["sport"] == "football"
    assert turf["display_image_url"] == SPORT_IMAGES["football"]


@pytest.mark.asyncio
async def test_create_turf_rejects_negative_rate(db_session):
    with pytest.raises(ValueError, match="Hourly rate"):
        await turf_service.create_turf(db_session, name="Cheap", location="Nowhere", hourly_rate=-1)


@pytest.mark.asyncio
async def test_list_turfs_ordered_by_name_and_filtered(db_session):
    await turf_service.create_turf(db_session, name="Zeta Courts", location="A", sport="basketball")
    await turf_service.create_turf(db_session, name="Alpha Pitch", location="B", sport="soccer")
    await turf_service.create_turf(
        db_session, name="Mid Field", location="C", image_url="https://img.example/own.jpg"
    )

    turfs = await turf_service.list_turfs(db_session)
    assert [t["name"] for t in turfs] == ["Alpha Pitch", "Mid Field", "Zeta Courts"]
    assert turfs[0]["display_image_url"] == SPORT_IMAGES["soccer"]
    assert turfs[1]["display_image_url"] == "https://img.example/own.jpg"

    basketball = await turf_service.list_turfs(db_session, sport="basketball")
    assert [t["name"] for t in basketball] == ["Zeta Courts"]


@pytest.mark.asyncio
async def test_get_turf_not_found(db_session):
    with pytest.raises(turf_service.TurfNotFoundError):
        await turf_service.get_turf(db_session, 9999)


# ──────────────────────────────────────────────────────────────
# Booking
# ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_booking_open_slot_marks_it_booked(db_session, athletes, turf, tomorrow):
    result = await turf_service.create_booking(
        db_session, athletes["alice"], turf["id"], tomorrow, "6:00 PM"
    )

    booking = result["booking"]
    assert booking["status"] == "confirmed"
    assert booking["time_slot"] == "6:00 PM"
    assert booking["turf"]["name"] == "Downtown Arena"
    assert result["message"] == (
        f"You've booked Downtown Arena for {tomorrow.strftime('%B')} "
        f"{tomorrow.day}, {tomorrow.year} at 6:00 PM"
    )

    booked = await turf_service.get_booked_slots(db_session, turf["id"], tomorrow)
    assert booked == ["6:00 PM"]

    availability = await turf_service.get_availability(db_session, turf["id"], tomorrow.isoformat())
    slot = next(s for s in availability["slots"] if s["time_slot"] == "6:00 PM")
    assert slot["is_booked"] is True
    assert availability["available_count"] == len(TIME_SLOTS) - 1


@pytest.mark.asyncio
async def test_booking_taken_slot_is_unavailable(db_session, athletes, turf, tomorrow):
    await turf_service.create_booking(db_session, athletes["alice"], turf["id"], tomorrow, "7:00 AM")

    with pytest.raises(turf_service.SlotUnavailableError):
        await turf_service.create_booking(db_session, athletes["bob"], turf["id"], tomorrow, "7:00 AM")


@pytest.mark.asyncio
async def test_same_slot_on_another_day_is_free(db_session, athletes, turf, tomorrow):
    await turf_service.create_booking(db_session, athletes["alice"], turf["id"], tomorrow, "7:00 AM")
    result = await turf_service.create_booking(
        db_session, athletes["bob"], turf["id"], tomorrow + timedelta(days=1), "7:00 AM"
    )
    assert result["booking"]["user_id"] == athletes["bob"]


@pytest.mark.asyncio
async def test_fully_booked_day_disables_every_slot(db_session, athletes, turf, tomorrow):
    for slot in TIME_SLOTS:
        db_session.add(
            Booking(user_id=athletes["alice"], turf_id=turf["id"], booking_date=tomorrow, time_slot=slot)
        )
    await db_session.flush()

    availability = await turf_service.get_availability(db_session, turf["id"], tomorrow)
    assert availability["available_count"] == 0
    assert all(s["is_booked"] for s in availability["slots"])


@pytest.mark.asyncio
async def test_booking_rejects_unknown_slot(db_session, athletes, turf, tomorrow):
    with pytest.raises(turf_service.InvalidTimeSlotError):
        await turf_service.create_booking(db_session, athletes["alice"], turf["id"], tomorrow, "3:30 AM")


@pytest.mark.asyncio
async def test_booking_rejects_past_date(db_session, athletes, turf):
    yesterday = today() - timedelta(days=1)
    with pytest.raises(ValueError, match="past"):
        await turf_service.create_booking(db_session, athletes["alice"], turf["id"], yesterday, "6:00 AM")


@pytest.mark.asyncio
async def test_booking_missing_turf(db_session, athletes, tomorrow):
    with pytest.raises(turf_service.TurfNotFoundError):
        await turf_service.create_booking(db_session, athletes["alice"], 4242, tomorrow, "6:00 AM")


@pytest.mark.asyncio
async def test_booking_records_notification(db_session, athletes, turf, tomorrow):
    await turf_service.create_booking(db_session, athletes["alice"], turf["id"], tomorrow, "9:00 AM")

    result = await db_session.execute(
        select(Notification).where(Notification.user_id == athletes["alice"])
    )
    notifications = result.scalars().all()
    assert len(notifications) == 1
    assert notifications[0].title == "Booking Confirmed!"


# ──────────────────────────────────────────────────────────────
# My bookings / cancellation
# ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_user_bookings_newest_date_first(db_session, athletes, turf, tomorrow):
    later = tomorrow + timedelta(days=5)
    await turf_service.create_booking(db_session, athletes["alice"], turf["id"], tomorrow, "8:00 AM")
    await turf_service.create_booking(db_session, athletes["alice"], turf["id"], later, "8:00 AM")
    await turf_service.create_booking(db_session, athletes["bob"], turf["id"], tomorrow, "9:00 AM")

    bookings = await turf_service.list_user_bookings(db_session, athletes["alice"])
    assert [b["booking_date"] for b in bookings] == [later.isoformat(), tomorrow.isoformat()]
    assert bookings[0]["turf"] == {
        "name": "Downtown Arena",
        "location": "123 Main St",
        "hourly_rate": 50.0,
    }


@pytest.mark.asyncio
async def test_cancel_booking_frees_slot(db_session, athletes, turf, tomorrow):
    result = await turf_service.create_booking(
        db_session, athletes["alice"], turf["id"], tomorrow, "5:00 PM"
    )
    await turf_service.cancel_booking(db_session, result["booking"]["id"], athletes["alice"])

    assert await turf_service.get_booked_slots(db_session, turf["id"], tomorrow) == []
    rebooked = await turf_service.create_booking(
        db_session, athletes["bob"], turf["id"], tomorrow, "5:00 PM"
    )
    assert rebooked["booking"]["user_id"] == athletes["bob"]


@pytest.mark.asyncio
async def test_only_owner_can_cancel(db_session, athletes, turf, tomorrow):
    result = await turf_service.create_booking(
        db_session, athletes["alice"], turf["id"], tomorrow, "5:00 PM"
    )
    with pytest.raises(turf_service.NotAuthorizedError):
        await turf_service.cancel_booking(db_session, result["booking"]["id"], athletes["bob"])

    assert await turf_service.get_booked_slots(db_session, turf["id"], tomorrow) == ["5:00 PM"]


@pytest.mark.asyncio
async def test_cancel_missing_booking(db_session, athletes):
    with pytest.raises(turf_service.BookingNotFoundError):
        await turf_service.cancel_booking(db_session, 12345, athletes["alice"])


@pytest.mark.asyncio
async def test_unique_constraint_blocks_raw_double_booking(db_session, athletes, turf, tomorrow):
    """The database constraint holds even when the service read is bypassed."""
    from sqlalchemy.exc import IntegrityError
    from arena.utils.db_errors import is_unique_violation

    db_session.add(Booking(user_id=athletes["alice"], turf_id=turf["id"], booking_date=tomorrow, time_slot="6:00 AM"))
    await db_session.flush()
    db_session.add(Booking(user_id=athletes["bob"], turf_id=turf["id"], booking_date=tomorrow, time_slot="6:00 AM"))
    with pytest.raises(IntegrityError) as exc_info:
        await db_session.flush()
    assert is_unique_violation(exc_info.value)
    await db_session.rollback()

    assert (await db_session.execute(select(Turf))).scalars().all() == []


@pytest.mark.asyncio
async def test_booking_race_lost_at_constraint_is_unavailable(monkeypatch, db_session, athletes, turf, tomorrow):
    """A stale availability read still ends in SlotUnavailableError, not a raw IntegrityError."""
    await turf_service.create_booking(db_session, athletes["bob"], turf["id"], tomorrow, "6:00 AM")

    async def stale_booked_slots(session, turf_id, booking_date):
        return []

    monkeypatch.setattr(turf_service, "get_booked_slots", stale_booked_slots)

    with pytest.raises(turf_service.SlotUnavailableError):
        await turf_service.create_booking(db_session, athletes["alice"], turf["id"], tomorrow, "6:00 AM")

    # Only the losing insert is rolled back
    bookings = (await db_session.execute(select(Booking))).scalars().all()
    assert [(b.user_id, b.time_slot) for b in bookings] == [(athletes["bob"], "6:00 AM")]


@pytest.mark.asyncio
async def test_failed_notification_keeps_booking(db_session, athletes, turf, tomorrow):
    if db_session.bind.dialect.name != "sqlite":
        pytest.skip("uses a SQLite trigger to break notification inserts")

    await db_session.execute(
        text(
            "CREATE TRIGGER notifications_down BEFORE INSERT ON notifications "
            "BEGIN SELECT RAISE(ABORT, 'notifications down'); END"
        )
    )

    result = await turf_service.create_booking(
        db_session, athletes["alice"], turf["id"], tomorrow, "8:00 PM"
    )
    assert result["message"].startswith("You've booked Downtown Arena")

    bookings = (await db_session.execute(select(Booking))).scalars().all()
    assert [b.id for b in bookings] == [result["booking"]["id"]]
    assert (await db_session.execute(select(Notification))).scalars().all() == []
