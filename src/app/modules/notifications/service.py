"""
Notifications Service Layer

Users read and manage their own notifications; staff can create them for
any user or broadcast to many.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.notifications import repository
from app.modules.notifications.models import Notification
from app.modules.shared import ForbiddenError, NotFoundError
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class NotificationNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="Notification not found", error_code="NOTIFICATION_NOT_FOUND")


class RecipientNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message=message, error_code="USER_NOT_FOUND")


async def create_notification(
    db: AsyncSession, *, user_id: int, title: str, message: str
) -> Notification:
    """
    Create a notification for an existing user.

    Raises:
        RecipientNotFoundError: If the user does not exist
    """
    if not await UserRepository.get_by_id(db, user_id):
        logger.warning(f"Notification for missing user {user_id}")
        raise RecipientNotFoundError()

    notification = await repository.create(db, user_id=user_id, title=title, message=message)
    logger.info(f"Created notification {notification.id} for user {user_id}")
    return notification


async def broadcast(
    db: AsyncSession, *, title: str, message: str, user_ids: list[int] | None = None
) -> list[Notification]:
    """
    Send the same notification to many users.

    With ``user_ids`` omitted every user is notified. An explicit list must
    reference only existing users; an empty list creates nothing.

    Raises:
        RecipientNotFoundError: If any listed user does not exist
    """
    if user_ids is None:
        targets = await UserRepository.get_all_ids(db)
    else:
        targets = list(dict.fromkeys(user_ids))
        if targets and await UserRepository.count_existing(db, targets) != len(targets):
            logger.warning(f"Broadcast rejected: unknown users in {targets}")
            raise RecipientNotFoundError("One or more users not found")

    if not targets:
        return []

    notifications = await repository.create_many(
        db,
        [{"user_id": user_id, "title": title, "message": message} for user_id in targets],
    )
    logger.info(f"Broadcast notification '{title}' to {len(notifications)} users")
    return notifications


async def list_notifications(db: AsyncSession, user_id: int) -> list[Notification]:
    return await repository.get_for_user(db, user_id)


async def _get_owned(db: AsyncSession, notification_id: int, user_id: int) -> Notification:
    notification = await repository.get_by_id(db, notification_id)

    if not notification:
        raise NotificationNotFoundError()

    if notification.user_id != user_id:
        logger.warning(f"User {user_id} denied access to notification {notification_id}")
        raise ForbiddenError()

    return notification


async def mark_as_read(db: AsyncSession, notification_id: int, user_id: int) -> Notification:
    notification = await _get_owned(db, notification_id, user_id)
    return await repository.mark_read(db, notification)


async def mark_all_as_read(db: AsyncSession, user_id: int) -> int:
    count = await repository.mark_all_read(db, user_id)
    logger.info(f"Marked {count} notifications read for user {user_id}")
    return count


async def delete_notification(db: AsyncSession, notification_id: int, user_id: int) -> bool:
    await _get_owned(db, notification_id, user_id)
    return await repository.delete_by_id(db, notification_id)


async def unread_count(db: AsyncSession, user_id: int) -> int:
    return await repository.count_unread(db, user_id)
