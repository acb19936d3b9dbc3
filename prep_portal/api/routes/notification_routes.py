"""
Notification Routes (own notifications only)

GET /notifications - Latest notifications
GET /notifications/unread/count - Unread count
PUT /notifications/mark-all-seen - Mark all as seen
PUT /notifications/{id}/seen - Mark one as seen
DELETE /notifications/{id} - Delete one
DELETE /notifications - Clear all
"""

from fastapi import APIRouter, Depends
from typing import List

from prep_portal.api.deps import get_notification_service
from prep_portal.core.auth import CurrentUser, get_current_user
from prep_portal.services.mongo_service import serialize_doc, serialize_docs
from prep_portal.services.notification_service import NotificationService
from prep_portal.schemas.schemas import MessageResponse, NotificationResponse, UnreadCountResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    return serialize_docs(notifications.list_for_user(user.id))


@router.get("/unread/count", response_model=UnreadCountResponse)
async def unread_count(
    user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(count=notifications.unread_count(user.id))


# Declared before /{notification_id}/seen so the literal path wins
@router.put("/mark-all-seen", response_model=MessageResponse)
async def mark_all_seen(
    user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    notifications.mark_all_seen(user.id)
    return MessageResponse(message="All notifications marked as seen")


@router.put("/{notification_id}/seen")
async def mark_seen(
    notification_id: str,
    user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    notification = notifications.mark_seen(notification_id, user.id)
    return {"message": "Notification marked as seen", "notification": serialize_doc(notification)}


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    notifications.delete(notification_id, user.id)
    return MessageResponse(message="Notification deleted successfully")


@router.delete("")
async def clear_notifications(
    user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    deleted = notifications.clear(user.id)
    return {"message": "All notifications cleared successfully", "deletedCount": deleted}
