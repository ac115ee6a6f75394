from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, sessionmaker

from urgentjobs.database import get_db, get_session_factory
from urgentjobs.errors import Forbidden, Unauthorized
from urgentjobs.models.user import User
from urgentjobs.services.application_service import ApplicationService
from urgentjobs.services.authorization import AuthorizationGate, Principal
from urgentjobs.services.notification_service import NotificationDispatcher
from urgentjobs.utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise Unauthorized()
    claims = decode_access_token(credentials.credentials)
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise Unauthorized("Invalid token. Please log in again") from exc

    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("The user belonging to this token no longer exists")
    if not user.active:
        raise Unauthorized("This account has been deactivated")
    # Role comes from the database so a role change takes effect immediately.
    return Principal(id=user.id, role=user.role)


def require_roles(*roles: str):
    async def checker(principal: Principal = Depends(get_current_user)) -> Principal:
        if principal.role not in roles:
            raise Forbidden(f"User role {principal.role} is not authorized to access this route")
        return principal

    return checker


def get_notifier(session_factory: sessionmaker = Depends(get_session_factory)) -> NotificationDispatcher:
    return NotificationDispatcher(session_factory)


def get_application_service(
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> ApplicationService:
    return ApplicationService(db, notifier, AuthorizationGate(db))
