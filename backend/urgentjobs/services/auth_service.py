import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from urgentjobs.errors import Conflict, Unauthorized
from urgentjobs.models.user import EmployerProfile, JobSeekerProfile, User
from urgentjobs.schemas.auth import RegisterRequest, UserSummary
from urgentjobs.utils.clock import utc_now
from urgentjobs.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def user_summary(user: User) -> UserSummary:
    company_name = user.employer_profile.company_name if user.employer_profile else None
    return UserSummary(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        company_name=company_name,
    )


def auth_payload(user: User) -> dict:
    return {"user": user_summary(user), "token": create_access_token(user.id, user.role)}


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, req: RegisterRequest) -> User:
        email = req.email.lower()
        if self.db.query(User.id).filter(User.email == email).first():
            raise Conflict("User already exists with this email")

        now = utc_now()
        user = User(
            email=email,
            password_hash=hash_password(req.password),
            first_name=req.first_name,
            last_name=req.last_name,
            phone=req.phone,
            role=req.role,
            active=True,
            created_at=now,
            updated_at=now,
        )
        # User row and role profile land together or not at all.
        try:
            self.db.add(user)
            self.db.flush()
            if req.role == "job_seeker":
                self.db.add(JobSeekerProfile(user_id=user.id, skills=[], created_at=now, updated_at=now))
            else:
                self.db.add(
                    EmployerProfile(
                        user_id=user.id,
                        company_name=req.company_name.strip(),
                        created_at=now,
                        updated_at=now,
                    )
                )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Registration for %s rolled back", email)
            raise
        self.db.refresh(user)
        logger.info("Registered %s user %d", user.role, user.id)
        return user

    def login(self, email: str, password: str) -> User:
        user = self.db.query(User).filter(User.email == email.lower()).first()
        if user is None or not verify_password(user.password_hash, password):
            raise Unauthorized("Invalid credentials")
        if not user.active:
            raise Unauthorized("This account has been deactivated")
        return user

    def change_password(self, user_id: int, current_password: str, new_password: str) -> User:
        user = self.db.get(User, user_id)
        if not verify_password(user.password_hash, current_password):
            raise Unauthorized("Current password is incorrect")
        user.password_hash = hash_password(new_password)
        user.updated_at = utc_now()
        self.db.commit()
        self.db.refresh(user)
        return user
