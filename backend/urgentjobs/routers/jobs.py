from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from urgentjobs.database import get_db
from urgentjobs.dependencies import Principal, require_roles
from urgentjobs.errors import NotFound
from urgentjobs.models.job import Job
from urgentjobs.models.user import EmployerProfile
from urgentjobs.schemas.common import Envelope, ok
from urgentjobs.schemas.job import JobCreate, JobResponse, JobStatus, JobUpdate, PayType, Urgency
from urgentjobs.services.job_search import JobFilters, job_to_response, search_jobs
from urgentjobs.utils.clock import utc_now
from urgentjobs.utils.pagination import Page, page_params

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _employer_profile(db: Session, principal: Principal) -> EmployerProfile:
    profile = db.query(EmployerProfile).filter(EmployerProfile.user_id == principal.id).first()
    if profile is None:
        raise NotFound("Employer profile not found")
    return profile


def _owned_job(db: Session, principal: Principal, job_id: int) -> Job:
    profile = _employer_profile(db, principal)
    job = db.query(Job).filter(Job.id == job_id, Job.employer_id == profile.id).first()
    if job is None:
        raise NotFound("Job not found or not authorized")
    return job


@router.get("", response_model=Envelope[list[JobResponse]])
async def list_jobs(
    status: JobStatus = "active",
    category: str | None = None,
    urgency: Urgency | None = None,
    pay_type: PayType | None = None,
    min_pay: float | None = Query(None, ge=0),
    max_pay: float | None = Query(None, ge=0),
    keyword: str | None = None,
    latitude: float | None = Query(None, ge=-90, le=90),
    longitude: float | None = Query(None, ge=-180, le=180),
    radius: float | None = Query(None, gt=0),
    sort_by: Literal["created_at", "pay_amount", "start_date", "title"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    page: Page = Depends(page_params),
    db: Session = Depends(get_db),
):
    filters = JobFilters(
        status=status,
        category=category,
        urgency=urgency,
        pay_type=pay_type,
        min_pay=min_pay,
        max_pay=max_pay,
        keyword=keyword,
        latitude=latitude,
        longitude=longitude,
        radius=radius,
    )
    jobs, meta = search_jobs(db, filters, page, sort_by, sort_order)
    return ok("Jobs retrieved successfully", [job_to_response(j, db) for j in jobs], meta)


@router.get("/employer/listings", response_model=Envelope[list[JobResponse]])
async def list_employer_jobs(
    status: JobStatus | None = None,
    page: Page = Depends(page_params),
    principal: Principal = Depends(require_roles("employer")),
    db: Session = Depends(get_db),
):
    profile = _employer_profile(db, principal)
    filters = JobFilters(status=status, employer_id=profile.id)
    jobs, meta = search_jobs(db, filters, page)
    return ok("Employer jobs retrieved successfully", [job_to_response(j, db) for j in jobs], meta)


@router.get("/{job_id}", response_model=Envelope[JobResponse])
async def get_job(job_id: int, db: Session = Depends(get_db)):
    job = db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    return ok("Job retrieved successfully", job_to_response(job, db))


@router.post("", response_model=Envelope[JobResponse], status_code=201)
async def create_job(
    req: JobCreate,
    principal: Principal = Depends(require_roles("employer")),
    db: Session = Depends(get_db),
):
    profile = _employer_profile(db, principal)
    now = utc_now()
    job = Job(employer_id=profile.id, created_at=now, updated_at=now, **req.model_dump())
    db.add(job)
    db.commit()
    db.refresh(job)
    return ok("Job created successfully", job_to_response(job, db))


@router.put("/{job_id}", response_model=Envelope[JobResponse])
async def update_job(
    job_id: int,
    req: JobUpdate,
    principal: Principal = Depends(require_roles("employer")),
    db: Session = Depends(get_db),
):
    job = _owned_job(db, principal, job_id)
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(job, field, value)
    job.updated_at = utc_now()
    db.commit()
    db.refresh(job)
    return ok("Job updated successfully", job_to_response(job, db))


@router.delete("/{job_id}", response_model=Envelope[dict])
async def delete_job(
    job_id: int,
    principal: Principal = Depends(require_roles("employer")),
    db: Session = Depends(get_db),
):
    job = _owned_job(db, principal, job_id)
    db.delete(job)
    db.commit()
    return ok("Job deleted successfully")
