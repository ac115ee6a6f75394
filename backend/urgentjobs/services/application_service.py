"""Job applications and the status engine that moves them between states.

Accepting an application is the only transition with side effects: every
other pending application for the same job is rejected and the job is
marked filled, all in the transaction that writes the acceptance.
"""
import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session, aliased

from urgentjobs.errors import Conflict, Forbidden, InvalidStatus, InvalidTransition, NotFound
from urgentjobs.models.application import APPLICATION_STATUSES, Application
from urgentjobs.models.job import Job
from urgentjobs.models.user import JobSeekerProfile
from urgentjobs.schemas.application import ApplicationResponse
from urgentjobs.services.authorization import AuthorizationGate, Principal
from urgentjobs.services.notification_service import NotificationDispatcher
from urgentjobs.utils.clock import utc_now
from urgentjobs.utils.pagination import Page, paginate

logger = logging.getLogger(__name__)

# Targets each role may request. Ownership is checked separately.
ROLE_TRANSITIONS = {
    "employer": ("accepted", "rejected"),
    "job_seeker": ("withdrawn",),
    "admin": APPLICATION_STATUSES,
}


def application_to_response(application: Application) -> ApplicationResponse:
    job = application.job
    seeker_user = application.job_seeker.user if application.job_seeker else None
    return ApplicationResponse(
        id=application.id,
        job_id=application.job_id,
        job_seeker_id=application.job_seeker_id,
        cover_letter=application.cover_letter,
        status=application.status,
        created_at=application.created_at,
        updated_at=application.updated_at,
        job_title=job.title if job else None,
        company_name=job.employer.company_name if job and job.employer else None,
        seeker_first_name=seeker_user.first_name if seeker_user else None,
        seeker_last_name=seeker_user.last_name if seeker_user else None,
    )


class ApplicationService:
    def __init__(self, db: Session, notifier: NotificationDispatcher, gate: AuthorizationGate):
        self.db = db
        self.notifier = notifier
        self.gate = gate

    def create(self, actor: Principal, job_id: int, cover_letter: str | None) -> Application:
        job = self.db.get(Job, job_id)
        profile_id = self.gate.check_create(actor, job)
        now = utc_now()
        application = Application(
            job_id=job.id,
            job_seeker_id=profile_id,
            cover_letter=cover_letter,
            status="pending",
            created_at=now,
            updated_at=now,
        )
        self.db.add(application)
        self.db.commit()
        self.db.refresh(application)
        logger.info("Application %d created for job %d", application.id, job.id)

        applicant = application.job_seeker.user
        self._notify_safely(
            job.employer.user_id,
            "new_application",
            {"applicant_name": applicant.full_name, "job_title": job.title, "related_id": application.id},
        )
        return application

    def get(self, application_id: int, actor: Principal) -> Application:
        application = self.db.get(Application, application_id)
        if application is None:
            raise NotFound("Application not found")
        self.gate.ensure_can_view(application, actor)
        return application

    def list_for_seeker(self, actor: Principal, page: Page, status: str | None = None):
        profile_id = self.gate.seeker_profile_id(actor.id)
        if profile_id is None:
            raise NotFound("Job seeker profile not found")
        query = self.db.query(Application).filter(Application.job_seeker_id == profile_id)
        if status:
            query = query.filter(Application.status == status)
        query = query.order_by(Application.created_at.desc(), Application.id.desc())
        return paginate(query, page)

    def list_for_job(self, actor: Principal, job_id: int, page: Page, status: str | None = None):
        job = self.db.get(Job, job_id)
        if job is None or not self.gate.owns_job(actor, job):
            raise NotFound("Job not found or not authorized")
        query = self.db.query(Application).filter(Application.job_id == job.id)
        if status:
            query = query.filter(Application.status == status)
        query = query.order_by(Application.created_at.desc(), Application.id.desc())
        return paginate(query, page)

    def transition(self, application_id: int, requested_status: str, actor: Principal) -> Application:
        if requested_status not in APPLICATION_STATUSES:
            raise InvalidStatus("Invalid status")

        application = self.db.get(Application, application_id)
        if application is None:
            raise NotFound("Application not found")

        allowed = ROLE_TRANSITIONS.get(actor.role)
        if allowed is None:
            raise Forbidden("Not authorized to update this application")
        if requested_status not in allowed:
            raise InvalidTransition(f"Role {actor.role} cannot set an application to {requested_status}")
        if actor.role == "employer" and not self.gate.owns_job(actor, application.job):
            raise Forbidden("Not authorized to update this application")
        if actor.role == "job_seeker" and not self.gate.is_applicant(actor, application):
            raise Forbidden("Not authorized to update this application")

        job = application.job
        previous = application.status
        now = utc_now()

        # Compare-and-set against the status read above; an acceptance also
        # requires that no other application of the job is accepted.
        stmt = update(Application).where(Application.id == application.id, Application.status == previous)
        if requested_status == "accepted":
            sibling = aliased(Application)
            already_accepted = (
                select(sibling.id)
                .where(sibling.job_id == job.id, sibling.id != application.id, sibling.status == "accepted")
                .exists()
            )
            stmt = stmt.where(~already_accepted)
        stmt = stmt.values(status=requested_status, updated_at=now).execution_options(synchronize_session=False)

        if self.db.execute(stmt).rowcount == 0:
            self.db.rollback()
            raise Conflict("Application was updated by another request; reload and try again")

        auto_rejected = []
        if requested_status == "accepted":
            auto_rejected = (
                self.db.query(Application.id, JobSeekerProfile.user_id)
                .join(JobSeekerProfile, Application.job_seeker_id == JobSeekerProfile.id)
                .filter(
                    Application.job_id == job.id,
                    Application.id != application.id,
                    Application.status == "pending",
                )
                .all()
            )
            self.db.execute(
                update(Application)
                .where(Application.id.in_([row.id for row in auto_rejected]))
                .values(status="rejected", updated_at=now)
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                update(Job)
                .where(Job.id == job.id)
                .values(status="filled", updated_at=now)
                .execution_options(synchronize_session=False)
            )
        self.db.commit()
        self.db.refresh(application)

        logger.info(
            "Application %d: %s -> %s by %s %d",
            application.id, previous, requested_status, actor.role, actor.id,
        )
        if auto_rejected:
            logger.info("Job %d filled; %d pending application(s) rejected", job.id, len(auto_rejected))

        job = application.job
        context = {"status": requested_status, "job_title": job.title, "related_id": application.id}
        if actor.role == "job_seeker":
            self._notify_safely(job.employer.user_id, "application_status", context)
        else:
            self._notify_safely(application.job_seeker.user_id, "application_status", context)
        for row in auto_rejected:
            self._notify_safely(
                row.user_id,
                "application_status",
                {"status": "rejected", "job_title": job.title, "related_id": row.id},
            )
        return application

    def _notify_safely(self, user_id: int, kind: str, context: dict) -> None:
        try:
            self.notifier.notify(user_id, kind, context)
        except Exception:
            logger.exception("Notification %s for user %s failed", kind, user_id)
