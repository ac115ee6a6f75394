"""Best-effort user notifications and the per-user inbox."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from urgentjobs.config import settings
from urgentjobs.errors import Forbidden, NotFound
from urgentjobs.models.notification import Notification
from urgentjobs.utils.clock import utc_now
from urgentjobs.utils.pagination import Page, paginate

logger = logging.getLogger(__name__)

_STATUS_COPY = {
    "accepted": ("Application Accepted", "Your application for {job_title} has been accepted!"),
    "rejected": ("Application Rejected", "Your application for {job_title} was not accepted."),
    "withdrawn": ("Application Withdrawn", "An application for {job_title} has been withdrawn."),
}


def render(kind: str, context: dict) -> tuple[str, str]:
    """Return (title, message) for a notification kind."""
    if kind == "new_application":
        return (
            "New Job Application",
            f"{context['applicant_name']} has applied for your job: {context['job_title']}",
        )
    if kind == "application_status":
        status = context["status"]
        if status in _STATUS_COPY:
            title, template = _STATUS_COPY[status]
            return title, template.format(job_title=context["job_title"])
        return "Application Status Updated", f"Your application status has been updated to {status}."
    if kind == "new_review":
        return "New Review Received", f"You have received a {context['rating']}-star review."
    raise ValueError(f"Unknown notification kind: {kind}")


class NotificationDispatcher:
    """Writes notifications outside the caller's transaction.

    Each attempt opens a fresh session from the factory, so a failure here
    never touches the session of the request that triggered it.
    """

    def __init__(self, session_factory: sessionmaker, max_attempts: int | None = None):
        self.session_factory = session_factory
        self.max_attempts = max_attempts or settings.notification_max_attempts

    def notify(self, target_user_id: int, kind: str, context: dict) -> Notification | None:
        try:
            title, message = render(kind, context)
        except (KeyError, ValueError) as exc:
            logger.error("Dropping %s notification for user %s: %s", kind, target_user_id, exc)
            return None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._write(target_user_id, kind, title, message, context.get("related_id"))
            except SQLAlchemyError as exc:
                logger.warning(
                    "Notification attempt %d/%d for user %s failed: %s",
                    attempt, self.max_attempts, target_user_id, exc,
                )
        logger.error("Dropping %s notification for user %s after %d attempts", kind, target_user_id, self.max_attempts)
        return None

    def _write(self, user_id: int, kind: str, title: str, message: str, related_id: int | None) -> Notification:
        session = self.session_factory()
        try:
            notification = Notification(
                user_id=user_id,
                title=title,
                message=message,
                type=kind,
                related_id=related_id,
                is_read=False,
                created_at=utc_now(),
            )
            session.add(notification)
            session.commit()
            session.refresh(notification)
            session.expunge(notification)
            return notification
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()


class NotificationInbox:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: int, page: Page, unread_only: bool = False):
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        return paginate(query, page)

    def unread_count(self, user_id: int) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    def _owned(self, notification_id: int, user_id: int) -> Notification:
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotFound("Notification not found")
        if notification.user_id != user_id:
            raise Forbidden("Not authorized to access this notification")
        return notification

    def mark_as_read(self, notification_id: int, user_id: int) -> Notification:
        notification = self._owned(notification_id, user_id)
        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: int) -> list[int]:
        unread = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .all()
        )
        for notification in unread:
            notification.is_read = True
        self.db.commit()
        return [n.id for n in unread]

    def delete(self, notification_id: int, user_id: int) -> None:
        notification = self._owned(notification_id, user_id)
        self.db.delete(notification)
        self.db.commit()
