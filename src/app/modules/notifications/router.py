"""
Notifications Router

Endpoints for the caller's own notifications:
- GET    /notifications               - List (unread first)
- GET    /notifications/unread-count  - Unread count
- POST   /notifications/read-all      - Mark all read
- PATCH  /notifications/{id}/read     - Mark one read
- DELETE /notifications/{id}          - Delete one
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.modules.notifications import service
from app.modules.notifications.schemas import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from app.modules.shared import ServiceError, handle_service_error, internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[NotificationResponse], summary="List My Notifications")
async def list_notifications(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> list[NotificationResponse]:
    notifications = await service.list_notifications(db, user.id)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread Count")
async def get_unread_count(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=await service.unread_count(db, user.id))


@router.post("/read-all", response_model=MarkAllReadResponse, summary="Mark All Read")
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await service.mark_all_as_read(db, user.id))


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark Notification Read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> NotificationResponse:
    try:
        notification = await service.mark_as_read(db, notification_id, user.id)
        return NotificationResponse.model_validate(notification)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error marking notification {notification_id} read: {e}")
        raise internal_error() from e


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    try:
        await service.delete_notification(db, notification_id, user.id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error deleting notification {notification_id}: {e}")
        raise internal_error() from e
