from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from urgentjobs.database import get_db
from urgentjobs.dependencies import Principal, get_current_user
from urgentjobs.models.notification import Notification
from urgentjobs.schemas.common import Envelope, ok
from urgentjobs.schemas.notification import MarkAllRead, NotificationResponse, UnreadCount
from urgentjobs.services.notification_service import NotificationInbox
from urgentjobs.utils.pagination import Page, page_params

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        user_id=n.user_id,
        title=n.title,
        message=n.message,
        type=n.type,
        related_id=n.related_id,
        is_read=n.is_read,
        created_at=n.created_at,
    )


@router.get("", response_model=Envelope[list[NotificationResponse]])
async def list_notifications(
    unread: bool = False,
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows, meta = NotificationInbox(db).list_for_user(principal.id, page, unread_only=unread)
    return ok("Notifications retrieved successfully", [_notification_to_response(n) for n in rows], meta)


@router.get("/count", response_model=Envelope[UnreadCount])
async def unread_count(principal: Principal = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok("Unread count retrieved successfully", {"count": NotificationInbox(db).unread_count(principal.id)})


@router.patch("/read-all", response_model=Envelope[MarkAllRead])
async def mark_all_as_read(principal: Principal = Depends(get_current_user), db: Session = Depends(get_db)):
    updated_ids = NotificationInbox(db).mark_all_as_read(principal.id)
    return ok("All notifications marked as read", {"updated_ids": updated_ids})


@router.patch("/{notification_id}/read", response_model=Envelope[NotificationResponse])
async def mark_as_read(
    notification_id: int,
    principal: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = NotificationInbox(db).mark_as_read(notification_id, principal.id)
    return ok("Notification marked as read", _notification_to_response(notification))


@router.delete("/{notification_id}", response_model=Envelope[dict])
async def delete_notification(
    notification_id: int,
    principal: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    NotificationInbox(db).delete(notification_id, principal.id)
    return ok("Notification deleted successfully")
