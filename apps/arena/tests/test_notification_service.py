"""
Unit tests for notification service.
Tests notification creation, retrieval, marking as read and toast payloads.
"""

import pytest
import pytest_asyncio
from arena.services import notification_service, user_service
from arena.database.models import NotificationType


@pytest_asyncio.fixture
async def test_user(db_session):
    return await user_service.create_user_with_profile(
        db_session, email="n1@example.com", password_hash="hash", name="N One", primary_sport="soccer"
    )


@pytest_asyncio.fixture
async def test_user2(db_session):
    return await user_service.create_user_with_profile(
        db_session, email="n2@example.com", password_hash="hash", name="N Two", primary_sport="soccer"
    )


async def _notify(db_session, user_id, title="Booking Confirmed!"):
    return await notification_service.create_notification(
        session=db_session,
        user_id=user_id,
        type=NotificationType.BOOKING_CONFIRMED.value,
        title=title,
        message="You've booked a turf",
        data={"booking_id": 1},
        link_url="/profile?tab=bookings",
    )


def test_build_toast():
    toast = notification_service.build_toast("Deleted", "Your request has been removed")
    assert toast == {"status": "success", "title": "Deleted", "message": "Your request has been removed"}

    with_row = notification_service.build_toast("Request Posted!", request={"id": 3})
    assert with_row["request"] == {"id": 3}
    assert with_row["message"] is None


@pytest.mark.asyncio
async def test_create_notification(db_session, test_user):
    notification = await _notify(db_session, test_user)

    assert notification["id"] > 0
    assert notification["user_id"] == test_user
    assert notification["type"] == "booking_confirmed"
    assert notification["data"] == {"booking_id": 1}
    assert notification["is_read"] is False
    assert notification["created_at"] is not None


@pytest.mark.asyncio
async def test_create_notification_validation(db_session, test_user):
    with pytest.raises(ValueError, match="title is required"):
        await notification_service.create_notification(
            db_session, user_id=test_user, type="booking_confirmed", title="", message="m"
        )


@pytest.mark.asyncio
async def test_notify_quietly_swallows_validation_errors(db_session, test_user):
    result = await notification_service.notify_quietly(
        db_session, user_id=test_user, type="booking_confirmed", title="t", message=""
    )
    assert result is None


@pytest.mark.asyncio
async def test_get_user_notifications_pagination(db_session, test_user, test_user2):
    for i in range(3):
        await _notify(db_session, test_user, title=f"N{i}")
    await _notify(db_session, test_user2)

    page = await notification_service.get_user_notifications(db_session, test_user, limit=2)
    assert page["total_count"] == 3
    assert len(page["notifications"]) == 2
    assert page["has_more"] is True
    assert page["notifications"][0]["title"] == "N2"

    rest = await notification_service.get_user_notifications(db_session, test_user, limit=2, offset=2)
    assert len(rest["notifications"]) == 1
    assert rest["has_more"] is False


@pytest.mark.asyncio
async def test_mark_as_read_and_unread_count(db_session, test_user, test_user2):
    first = await _notify(db_session, test_user)
    await _notify(db_session, test_user)
    assert await notification_service.get_unread_count(db_session, test_user) == 2

    read = await notification_service.mark_as_read(db_session, first["id"], test_user)
    assert read["is_read"] is True
    assert read["read_at"] is not None
    assert await notification_service.get_unread_count(db_session, test_user) == 1

    with pytest.raises(ValueError, match="not found"):
        await notification_service.mark_as_read(db_session, first["id"], test_user2)

    assert await notification_service.mark_all_as_read(db_session, test_user) == 1
    assert await notification_service.get_unread_count(db_session, test_user) == 0

    unread = await notification_service.get_user_notifications(db_session, test_user, unread_only=True)
    assert unread["total_count"] == 0
