from fastapi import APIRouter, Depends
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from urgentjobs.database import get_db
from urgentjobs.dependencies import Principal, get_application_service, require_roles
from urgentjobs.errors import InvalidInput, NotFound
from urgentjobs.models.application import APPLICATION_STATUSES, Application
from urgentjobs.models.job import JOB_STATUSES, Job
from urgentjobs.models.user import EmployerProfile, User
from urgentjobs.routers.applications import StatusFilter
from urgentjobs.routers.users import profile_to_response
from urgentjobs.schemas.application import ApplicationResponse, ApplicationStatusUpdate
from urgentjobs.schemas.common import Envelope, ok
from urgentjobs.schemas.job import AdminJobResponse, JobResponse, JobStatus, JobStatusUpdate
from urgentjobs.schemas.user import UserProfileResponse, UserStatusUpdate
from urgentjobs.services.application_service import ApplicationService, application_to_response
from urgentjobs.services.job_search import contains_pattern, job_to_response
from urgentjobs.utils.clock import utc_days_ago, utc_now
from urgentjobs.utils.pagination import Page, page_params, paginate

admin_only = require_roles("admin")

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_only)])


def _grouped(db: Session, column, keys) -> dict:
    counts = dict.fromkeys(keys, 0)
    for key, count in db.query(column, func.count()).group_by(column).all():
        counts[key] = count
    return counts


@router.get("/dashboard", response_model=Envelope[dict])
async def dashboard(db: Session = Depends(get_db)):
    latest_jobs = db.query(Job).order_by(Job.created_at.desc(), Job.id.desc()).limit(5).all()
    latest_applications = (
        db.query(Application).order_by(Application.created_at.desc(), Application.id.desc()).limit(5).all()
    )
    data = {
        "users": _grouped(db, User.role, ("job_seeker", "employer", "admin")),
        "jobs": _grouped(db, Job.status, JOB_STATUSES),
        "applications": _grouped(db, Application.status, APPLICATION_STATUSES),
        "new_users_last_7_days": db.query(User).filter(User.created_at >= utc_days_ago(7)).count(),
        "recent_jobs": [job_to_response(j, db).model_dump() for j in latest_jobs],
        "recent_applications": [application_to_response(a).model_dump() for a in latest_applications],
    }
    return ok("Dashboard retrieved successfully", data)


# --- users ---

@router.get("/users", response_model=Envelope[list[UserProfileResponse]])
async def list_users(
    role: str | None = None,
    search: str | None = None,
    page: Page = Depends(page_params),
    db: Session = Depends(get_db),
):
    query = db.query(User).outerjoin(EmployerProfile, EmployerProfile.user_id == User.id)
    if role:
        query = query.filter(User.role == role)
    if search:
        pattern = contains_pattern(search)
        query = query.filter(
            or_(
                User.email.ilike(pattern, escape="\\"),
                User.first_name.ilike(pattern, escape="\\"),
                User.last_name.ilike(pattern, escape="\\"),
                EmployerProfile.company_name.ilike(pattern, escape="\\"),
            )
        )
    users, meta = paginate(query.order_by(User.created_at.desc(), User.id.desc()), page)
    return ok("Users retrieved successfully", [profile_to_response(u) for u in users], meta)


@router.get("/users/{user_id}", response_model=Envelope[UserProfileResponse])
async def get_user(user_id: int, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return ok("User retrieved successfully", profile_to_response(user))


@router.patch("/users/{user_id}/status", response_model=Envelope[UserProfileResponse])
async def set_user_status(
    user_id: int,
    req: UserStatusUpdate,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    if user.id == principal.id and not req.active:
        raise InvalidInput("You cannot deactivate your own account")
    user.active = req.active
    user.updated_at = utc_now()
    db.commit()
    db.refresh(user)
    return ok("User status updated successfully", profile_to_response(user))


# --- jobs ---

@router.get("/jobs", response_model=Envelope[list[JobResponse]])
async def list_jobs(
    status: JobStatus | None = None,
    search: str | None = None,
    page: Page = Depends(page_params),
    db: Session = Depends(get_db),
):
    query = db.query(Job).join(EmployerProfile, Job.employer_id == EmployerProfile.id)
    if status:
        query = query.filter(Job.status == status)
    if search:
        pattern = contains_pattern(search)
        query = query.filter(
            or_(
                Job.title.ilike(pattern, escape="\\"),
                Job.description.ilike(pattern, escape="\\"),
                EmployerProfile.company_name.ilike(pattern, escape="\\"),
            )
        )
    jobs, meta = paginate(query.order_by(Job.created_at.desc(), Job.id.desc()), page)
    return ok("Jobs retrieved successfully", [job_to_response(j, db) for j in jobs], meta)


@router.get("/jobs/{job_id}", response_model=Envelope[AdminJobResponse])
async def get_job(job_id: int, db: Session = Depends(get_db)):
    job = db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    profile = job.employer
    contact = profile.user
    detail = AdminJobResponse(
        **job_to_response(job, db).model_dump(),
        company_logo=profile.company_logo,
        company_website=profile.company_website,
        employer_first_name=contact.first_name,
        employer_last_name=contact.last_name,
        employer_email=contact.email,
    )
    return ok("Job retrieved successfully", detail)


@router.patch("/jobs/{job_id}/status", response_model=Envelope[JobResponse])
async def set_job_status(job_id: int, req: JobStatusUpdate, db: Session = Depends(get_db)):
    job = db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    now = utc_now()
    job.status = req.status
    job.updated_at = now
    if req.status in ("filled", "expired"):
        (
            db.query(Application)
            .filter(Application.job_id == job.id, Application.status == "pending")
            .update({Application.status: "rejected", Application.updated_at: now}, synchronize_session=False)
        )
    db.commit()
    db.refresh(job)
    return ok("Job status updated successfully", job_to_response(job, db))


@router.delete("/jobs/{job_id}", response_model=Envelope[dict])
async def delete_job(job_id: int, db: Session = Depends(get_db)):
    job = db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    db.delete(job)
    db.commit()
    return ok("Job deleted successfully")


# --- applications ---

@router.get("/applications", response_model=Envelope[list[ApplicationResponse]])
async def list_applications(
    status: StatusFilter | None = None,
    job_id: int | None = None,
    page: Page = Depends(page_params),
    db: Session = Depends(get_db),
):
    query = db.query(Application)
    if status:
        query = query.filter(Application.status == status)
    if job_id is not None:
        query = query.filter(Application.job_id == job_id)
    rows, meta = paginate(query.order_by(Application.created_at.desc(), Application.id.desc()), page)
    return ok("Applications retrieved successfully", [application_to_response(a) for a in rows], meta)


@router.get("/applications/{application_id}", response_model=Envelope[ApplicationResponse])
async def get_application(
    application_id: int,
    principal: Principal = Depends(admin_only),
    service: ApplicationService = Depends(get_application_service),
):
    return ok("Application retrieved successfully", application_to_response(service.get(application_id, principal)))


@router.patch("/applications/{application_id}/status", response_model=Envelope[ApplicationResponse])
async def set_application_status(
    application_id: int,
    req: ApplicationStatusUpdate,
    principal: Principal = Depends(admin_only),
    service: ApplicationService = Depends(get_application_service),
):
    application = service.transition(application_id, req.status, principal)
    return ok("Application status updated successfully", application_to_response(application))
