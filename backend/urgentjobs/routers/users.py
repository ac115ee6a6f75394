from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from urgentjobs.database import get_db
from urgentjobs.dependencies import Principal, get_current_user, require_roles
from urgentjobs.errors import NotFound
from urgentjobs.models.application import APPLICATION_STATUSES, Application
from urgentjobs.models.job import JOB_STATUSES, Job
from urgentjobs.models.user import EmployerProfile, JobSeekerProfile, User
from urgentjobs.schemas.common import Envelope, ok
from urgentjobs.schemas.user import (
    BasicInfoUpdate,
    EmployerProfileUpdate,
    JobSeekerProfileUpdate,
    UserProfileResponse,
)
from urgentjobs.services.application_service import application_to_response
from urgentjobs.services.job_search import job_to_response
from urgentjobs.utils.clock import utc_now

router = APIRouter(prefix="/users", tags=["users"])

_SEEKER_FIELDS = (
    "bio", "skills", "experience_years", "education", "availability",
    "location_latitude", "location_longitude", "location_address",
)
_EMPLOYER_FIELDS = (
    "company_name", "company_description", "company_website", "company_logo", "industry",
    "location_latitude", "location_longitude", "location_address",
)


def profile_to_response(user: User) -> UserProfileResponse:
    data = {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone": user.phone,
        "profile_picture": user.profile_picture,
        "role": user.role,
        "active": user.active,
        "created_at": user.created_at,
    }
    if user.job_seeker_profile:
        profile = user.job_seeker_profile
        data["profile_id"] = profile.id
        data.update({field: getattr(profile, field) for field in _SEEKER_FIELDS})
    elif user.employer_profile:
        profile = user.employer_profile
        data["profile_id"] = profile.id
        data.update({field: getattr(profile, field) for field in _EMPLOYER_FIELDS})
    return UserProfileResponse(**data)


def _status_counts(db: Session, column, statuses, *criteria) -> dict:
    counts = dict.fromkeys(statuses, 0)
    rows = db.query(column, func.count()).filter(*criteria).group_by(column).all()
    for status, count in rows:
        counts[status] = count
    counts["total"] = sum(counts.values())
    return counts


@router.get("/profile", response_model=Envelope[UserProfileResponse])
async def get_profile(principal: Principal = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.get(User, principal.id)
    return ok("Profile retrieved successfully", profile_to_response(user))


@router.put("/profile/basic", response_model=Envelope[UserProfileResponse])
async def update_basic_info(
    req: BasicInfoUpdate,
    principal: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = db.get(User, principal.id)
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    user.updated_at = utc_now()
    db.commit()
    db.refresh(user)
    return ok("Profile updated successfully", profile_to_response(user))


@router.put("/profile/job-seeker", response_model=Envelope[UserProfileResponse])
async def update_job_seeker_profile(
    req: JobSeekerProfileUpdate,
    principal: Principal = Depends(require_roles("job_seeker")),
    db: Session = Depends(get_db),
):
    profile = db.query(JobSeekerProfile).filter(JobSeekerProfile.user_id == principal.id).first()
    if profile is None:
        raise NotFound("Job seeker profile not found")
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    profile.updated_at = utc_now()
    db.commit()
    return ok("Job seeker profile updated successfully", profile_to_response(db.get(User, principal.id)))


@router.put("/profile/employer", response_model=Envelope[UserProfileResponse])
async def update_employer_profile(
    req: EmployerProfileUpdate,
    principal: Principal = Depends(require_roles("employer")),
    db: Session = Depends(get_db),
):
    profile = db.query(EmployerProfile).filter(EmployerProfile.user_id == principal.id).first()
    if profile is None:
        raise NotFound("Employer profile not found")
    updates = req.model_dump(exclude_unset=True)
    if "company_website" in updates and updates["company_website"] is not None:
        updates["company_website"] = str(updates["company_website"])
    if updates.get("company_name") is None:
        updates.pop("company_name", None)
    for field, value in updates.items():
        setattr(profile, field, value)
    profile.updated_at = utc_now()
    db.commit()
    return ok("Employer profile updated successfully", profile_to_response(db.get(User, principal.id)))


@router.get("/dashboard", response_model=Envelope[dict])
async def dashboard(principal: Principal = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.get(User, principal.id)
    if user.job_seeker_profile:
        profile_id = user.job_seeker_profile.id
        recent = (
            db.query(Application)
            .filter(Application.job_seeker_id == profile_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .limit(5)
            .all()
        )
        data = {
            "applications": _status_counts(
                db, Application.status, APPLICATION_STATUSES, Application.job_seeker_id == profile_id
            ),
            "recent_applications": [application_to_response(a).model_dump() for a in recent],
        }
    elif user.employer_profile:
        profile_id = user.employer_profile.id
        recent_jobs = (
            db.query(Job)
            .filter(Job.employer_id == profile_id)
            .order_by(Job.created_at.desc(), Job.id.desc())
            .limit(5)
            .all()
        )
        recent_applications = (
            db.query(Application)
            .join(Job, Application.job_id == Job.id)
            .filter(Job.employer_id == profile_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .limit(5)
            .all()
        )
        application_counts = dict.fromkeys(APPLICATION_STATUSES, 0)
        rows = (
            db.query(Application.status, func.count())
            .join(Job, Application.job_id == Job.id)
            .filter(Job.employer_id == profile_id)
            .group_by(Application.status)
            .all()
        )
        for status, count in rows:
            application_counts[status] = count
        application_counts["total"] = sum(application_counts.values())
        data = {
            "jobs": _status_counts(db, Job.status, JOB_STATUSES, Job.employer_id == profile_id),
            "applications": application_counts,
            "recent_jobs": [job_to_response(j, db).model_dump() for j in recent_jobs],
            "recent_applications": [application_to_response(a).model_dump() for a in recent_applications],
        }
    else:
        data = {}
    return ok("Dashboard retrieved successfully", data)
