"""Who may see and create job applications.

Every check reads the database through the session handed to the gate; no
ownership is cached between calls.
"""
from dataclasses import dataclass

from sqlalchemy.orm import Session

from urgentjobs.errors import Conflict, Forbidden, NotFound
from urgentjobs.models.application import Application
from urgentjobs.models.job import Job
from urgentjobs.models.user import EmployerProfile, JobSeekerProfile


@dataclass(frozen=True)
class Principal:
    id: int
    role: str


class AuthorizationGate:
    def __init__(self, db: Session):
        self.db = db

    def seeker_profile_id(self, user_id: int) -> int | None:
        return self.db.query(JobSeekerProfile.id).filter(JobSeekerProfile.user_id == user_id).scalar()

    def employer_profile_id(self, user_id: int) -> int | None:
        return self.db.query(EmployerProfile.id).filter(EmployerProfile.user_id == user_id).scalar()

    def owns_job(self, actor: Principal, job: Job) -> bool:
        if actor.role != "employer":
            return False
        profile_id = self.employer_profile_id(actor.id)
        return profile_id is not None and job.employer_id == profile_id

    def is_applicant(self, actor: Principal, application: Application) -> bool:
        if actor.role != "job_seeker":
            return False
        profile_id = self.seeker_profile_id(actor.id)
        return profile_id is not None and application.job_seeker_id == profile_id

    def can_view(self, application: Application, actor: Principal) -> bool:
        if actor.role == "admin":
            return True
        if actor.role == "job_seeker":
            return self.is_applicant(actor, application)
        if actor.role == "employer":
            return self.owns_job(actor, application.job)
        return False

    def ensure_can_view(self, application: Application, actor: Principal) -> None:
        if not self.can_view(application, actor):
            raise Forbidden("Not authorized to view this application")

    def can_create(self, actor: Principal, job: Job | None) -> bool:
        try:
            self.check_create(actor, job)
        except (Forbidden, NotFound, Conflict):
            return False
        return True

    def check_create(self, actor: Principal, job: Job | None) -> int:
        """Raise unless ``actor`` may apply to ``job``; return the seeker profile id."""
        if actor.role != "job_seeker":
            raise Forbidden("Only job seekers can apply for jobs")
        profile_id = self.seeker_profile_id(actor.id)
        if profile_id is None:
            raise NotFound("Job seeker profile not found")
        if job is None or job.status != "active":
            raise NotFound("Job not found or not active")
        # Any earlier row blocks a new one, withdrawn included.
        existing = (
            self.db.query(Application.id)
            .filter(Application.job_id == job.id, Application.job_seeker_id == profile_id)
            .first()
        )
        if existing:
            raise Conflict("You have already applied for this job")
        return profile_id
