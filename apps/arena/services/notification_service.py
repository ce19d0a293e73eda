"""
Notification service for managing user notifications.

Every data operation surfaces a toast to the athlete: the route returns the
toast payload directly, and successful writes also persist an in-app
notification so the outcome can be reviewed later.
"""

from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, and_
from arena.database.models import Notification
from arena.utils.datetime_utils import utcnow
import json
import logging

logger = logging.getLogger(__name__)


def build_toast(title: str, message: Optional[str] = None, status: str = "success", **extra) -> Dict:
    """
    Build the toast payload returned by write endpoints.

    Args:
        title: Toast heading (e.g. "Booking Confirmed!")
        message: Optional body text
        status: "success" or "error"
        **extra: Additional keys merged into the payload (e.g. the written row)
    """
    payload = {"status": status, "title": title, "message": message}
    payload.update(extra)
    return payload


def _notification_to_dict(notification: Notification) -> Dict:
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "data": json.loads(notification.data) if notification.data else None,
        "is_read": notification.is_read,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
        "link_url": notification.link_url,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
    }


async def create_notification(
    session: AsyncSession,
    user_id: int,
    type: str,
    title: str,
    message: str,
    data: Optional[Dict] = None,
    link_url: Optional[str] = None
) -> Dict:
    """
    Create a single notification for a user.

    Args:
        session: Database session
        user_id: ID of the user to notify
        type: Notification type (NotificationType enum value)
        title: Notification title
        message: Notification message text
        data: Optional JSON metadata (dict will be serialized to JSON string)
        link_url: Optional URL for navigation when notification is clicked

    Returns:
        Dict containing the created notification data

    Raises:
        ValueError: If required fields are missing or invalid
    """
    if not user_id:
        raise ValueError("user_id is required")
    if not type:
        raise ValueError("type is required")
    if not title:
        raise ValueError("title is required")
    if not message:
        raise ValueError("message is required")

    # Serialize data dict to JSON string if provided
    data_json = None
    if data is not None:
        data_json = json.dumps(data)

    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data_json,
        link_url=link_url,
        is_read=False
    )

    session.add(notification)
    await session.flush()
    await session.refresh(notification)

    return _notification_to_dict(notification)


async def notify_quietly(session: AsyncSession, **kwargs) -> Optional[Dict]:
    """
    Create a notification without failing the surrounding write.

    The toast is already part of the HTTP response, so a failure here is
    logged and swallowed. The insert runs in a savepoint so a failed flush
    only rolls back the notification, not the caller's booking or post.
    """
    try:
        async with session.begin_nested():
            return await create_notification(session, **kwargs)
    except Exception as e:
        logger.warning(f"Failed to create notification for user {kwargs.get('user_id')}: {e}")
        return None


async def get_user_notifications(
    session: AsyncSession,
    user_id: int,
    limit: int = 50,
    offset: int = 0,
    unread_only: bool = False
) -> Dict:
    """
    Fetch user notifications with pagination.

    Returns:
        Dict containing:
            - notifications: List of notification dicts (ordered by created_at DESC)
            - total_count: Total number of notifications matching the criteria
            - has_more: Boolean indicating if there are more notifications
    """
    query = select(Notification).where(Notification.user_id == user_id)

    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await session.execute(count_query)
    total_count = total_result.scalar_one() or 0

    query = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .offset(offset)
    )
    result = await session.execute(query)
    notification_dicts = [_notification_to_dict(n) for n in result.scalars().all()]

    has_more = (offset + len(notification_dicts)) < total_count

    return {
        "notifications": notification_dicts,
        "total_count": total_count,
        "has_more": has_more,
    }


async def get_unread_count(session: AsyncSession, user_id: int) -> int:
    """Get count of unread notifications for a user."""
    result = await session.execute(
        select(func.count())
        .select_from(Notification)
        .where(
            and_(
                Notification.user_id == user_id,
                Notification.is_read == False  # noqa: E712
            )
        )
    )
    return result.scalar_one() or 0


async def mark_as_read(
    session: AsyncSession,
    notification_id: int,
    user_id: int
) -> Dict:
    """
    Mark a single notification as read.

    Raises:
        ValueError: If notification not found or doesn't belong to user
    """
    result = await session.execute(
        select(Notification).where(
            and_(
                Notification.id == notification_id,
                Notification.user_id == user_id
            )
        )
    )
    notification = result.scalar_one_or_none()

    if not notification:
        raise ValueError("Notification not found or access denied")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        await session.flush()
        await session.refresh(notification)

    return _notification_to_dict(notification)


async def mark_all_as_read(session: AsyncSession, user_id: int) -> int:
    """
    Mark all user notifications as read.

    Returns:
        Count of notifications marked as read
    """
    result = await session.execute(
        update(Notification)
        .where(
            and_(
                Notification.user_id == user_id,
                Notification.is_read == False  # noqa: E712
            )
        )
        .values(is_read=True, read_at=utcnow())
    )
    await session.flush()
    return result.rowcount or 0
