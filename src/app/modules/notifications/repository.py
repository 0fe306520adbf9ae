"""
Notifications Repository

Database operations for in-app notifications.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Notification


async def create(db: AsyncSession, *, user_id: int, title: str, message: str) -> Notification:
    """Create one notification."""
    notification = Notification(user_id=user_id, title=title, message=message, is_read=False)

    db.add(notification)
    await db.commit()
    await db.refresh(notification)

    return notification


async def create_many(db: AsyncSession, rows: Sequence[dict[str, Any]]) -> list[Notification]:
    """
    Create several notifications in one commit.

    Each row needs ``user_id``, ``title`` and ``message``.
    """
    notifications = [
        Notification(user_id=row["user_id"], title=row["title"], message=row["message"])
        for row in rows
    ]
    if not notifications:
        return []

    db.add_all(notifications)
    await db.commit()
    for notification in notifications:
        await db.refresh(notification)

    return notifications


async def get_by_id(db: AsyncSession, notification_id: int) -> Notification | None:
    """Get notification by ID."""
    return await db.get(Notification, notification_id)


async def get_for_user(db: AsyncSession, user_id: int) -> list[Notification]:
    """A user's notifications: unread first, then newest first."""
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(
            Notification.is_read.asc(),
            Notification.created_at.desc(),
            Notification.id.desc(),
        )
    )
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, notification: Notification) -> Notification:
    """Mark one notification read."""
    notification.is_read = True
    await db.commit()
    await db.refresh(notification)
    return notification


async def mark_all_read(db: AsyncSession, user_id: int) -> int:
    """Mark every unread notification of a user read. Returns the number changed."""
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await db.commit()
    return result.rowcount or 0


async def delete_by_id(db: AsyncSession, notification_id: int) -> bool:
    """Delete a notification. Returns whether a row was removed."""
    result = await db.execute(delete(Notification).where(Notification.id == notification_id))
    await db.commit()
    return (result.rowcount or 0) > 0


async def count_unread(db: AsyncSession, user_id: int) -> int:
    """Number of unread notifications for a user."""
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
    )
    return result.scalar_one()
