"""
Notifications Admin Router

- POST /admin/notifications           - Notify one user
- POST /admin/notifications/broadcast - Notify many (or all) users
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.modules.notifications import service
from app.modules.notifications.schemas import (
    BroadcastRequest,
    NotificationCreate,
    NotificationResponse,
)
from app.modules.shared import ServiceError, handle_service_error, internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=NotificationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Notification",
    responses={404: {"description": "User not found"}},
)
async def create_notification(
    data: NotificationCreate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> NotificationResponse:
    try:
        notification = await service.create_notification(
            db, user_id=data.user_id, title=data.title, message=data.message
        )
        logger.info(f"Admin {admin.id} notified user {data.user_id}")
        return NotificationResponse.model_validate(notification)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error creating notification: {e}")
        raise internal_error() from e


@router.post(
    "/broadcast",
    response_model=list[NotificationResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Broadcast Notification",
    description="""
Send the same notification to several users.

- Omit `user_ids` to notify every user.
- Every listed user must exist, otherwise nothing is sent (404).
- An empty `user_ids` list sends nothing.
""",
    responses={404: {"description": "One or more users not found"}},
)
async def broadcast(
    data: BroadcastRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> list[NotificationResponse]:
    try:
        notifications = await service.broadcast(
            db, title=data.title, message=data.message, user_ids=data.user_ids
        )
        logger.info(f"Admin {admin.id} broadcast to {len(notifications)} users")
        return [NotificationResponse.model_validate(n) for n in notifications]
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error broadcasting notification: {e}")
        raise internal_error() from e
