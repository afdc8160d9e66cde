"""
Notification Routes
Per-user in-app notifications
"""

from fastapi import APIRouter, Depends, status

from medclaims.api.deps import get_current_user, get_notification_center
from medclaims.models.user import User
from medclaims.schemas.notification import NotificationListResponse, NotificationResponse
from medclaims.services.notifications import NotificationCenter
from medclaims.utils.errors import NotFoundError

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: User = Depends(get_current_user),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> NotificationListResponse:
    items = notifications.list_for(current_user.id)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        unread=sum(1 for n in items if not n.read),
    )


@router.post("/read-all")
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> dict[str, int]:
    return {"updated": notifications.mark_all_read(current_user.id)}


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> None:
    if not notifications.mark_read(current_user.id, notification_id):
        raise NotFoundError("Notification not found")


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> None:
    if not notifications.remove(current_user.id, notification_id):
        raise NotFoundError("Notification not found")


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_notifications(
    current_user: User = Depends(get_current_user),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> None:
    notifications.clear(current_user.id)
