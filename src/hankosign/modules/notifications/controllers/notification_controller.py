from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hankosign.database import get_db
from hankosign.modules.auth.dependencies import get_current_user
from hankosign.modules.notifications.repositories.notification_repository import NotificationRepository
from hankosign.modules.notifications.services.notification_service import NotificationService
from hankosign.modules.notifications.models.schemas import (
    NotificationResponse,
    NotificationListResponse,
)
from hankosign.modules.users.models.user import User

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    repo = NotificationRepository(db)
    return NotificationService(repo)


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List the caller's notifications"
)
def list_notifications(
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    return NotificationListResponse(notifications=service.get_notifications(current_user.id))


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read"
)
def mark_notification_as_read(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    notif = service.mark_as_read(notification_id, current_user.id)
    if not notif:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )
    return notif
