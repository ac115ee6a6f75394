from dataclasses import dataclass

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from urgentjobs.models.application import Application
from urgentjobs.models.job import Job
from urgentjobs.schemas.job import JobResponse
from urgentjobs.utils.pagination import Page, paginate

SORT_COLUMNS = {
    "created_at": Job.created_at,
    "pay_amount": Job.pay_amount,
    "start_date": Job.start_date,
    "title": Job.title,
}


def contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere; use with escape="\\"."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class JobFilters:
    status: str | None = "active"
    category: str | None = None
    urgency: str | None = None
    pay_type: str | None = None
    min_pay: float | None = None
    max_pay: float | None = None
    keyword: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius: float | None = None
    employer_id: int | None = None


def apply_filters(query, filters: JobFilters):
    if filters.status:
        query = query.filter(Job.status == filters.status)
    if filters.employer_id is not None:
        query = query.filter(Job.employer_id == filters.employer_id)
    if filters.category:
        query = query.filter(Job.category == filters.category)
    if filters.urgency:
        query = query.filter(Job.urgency == filters.urgency)
    if filters.pay_type:
        query = query.filter(Job.pay_type == filters.pay_type)
    if filters.min_pay is not None:
        query = query.filter(Job.pay_amount >= filters.min_pay)
    if filters.max_pay is not None:
        query = query.filter(Job.pay_amount <= filters.max_pay)
    if filters.keyword:
        pattern = contains_pattern(filters.keyword)
        query = query.filter(
            or_(
                Job.title.ilike(pattern, escape="\\"),
                Job.description.ilike(pattern, escape="\\"),
                Job.requirements.ilike(pattern, escape="\\"),
            )
        )
    if filters.latitude is not None and filters.longitude is not None and filters.radius is not None:
        # haversine_km is registered on every SQLite connection.
        distance = func.haversine_km(
            filters.latitude, filters.longitude, Job.location_latitude, Job.location_longitude
        )
        query = query.filter(distance.isnot(None), distance <= filters.radius)
    return query


def search_jobs(db: Session, filters: JobFilters, page: Page, sort_by: str = "created_at", sort_order: str = "desc"):
    column = SORT_COLUMNS.get(sort_by, Job.created_at)
    ordering = column.asc() if sort_order == "asc" else column.desc()
    query = apply_filters(db.query(Job), filters).order_by(ordering, Job.id.desc())
    return paginate(query, page)


def job_to_response(job: Job, db: Session) -> JobResponse:
    application_count = db.query(func.count(Application.id)).filter(Application.job_id == job.id).scalar()
    return JobResponse(
        id=job.id,
        employer_id=job.employer_id,
        title=job.title,
        description=job.description,
        requirements=job.requirements,
        pay_amount=job.pay_amount,
        pay_type=job.pay_type,
        location_latitude=job.location_latitude,
        location_longitude=job.location_longitude,
        location_address=job.location_address,
        urgency=job.urgency,
        category=job.category,
        start_date=job.start_date,
        end_date=job.end_date,
        estimated_hours=job.estimated_hours,
        status=job.status,
        created_at=job.created_at,
        updated_at=job.updated_at,
        company_name=job.employer.company_name if job.employer else None,
        application_count=application_count,
    )
