from typing import Literal

from fastapi import APIRouter, Depends

from urgentjobs.dependencies import Principal, get_application_service, get_current_user, require_roles
from urgentjobs.schemas.application import ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate
from urgentjobs.schemas.common import Envelope, ok
from urgentjobs.services.application_service import ApplicationService, application_to_response
from urgentjobs.utils.pagination import Page, page_params

router = APIRouter(prefix="/applications", tags=["applications"])

StatusFilter = Literal["pending", "accepted", "rejected", "withdrawn"]


@router.post("", response_model=Envelope[ApplicationResponse], status_code=201)
async def apply_for_job(
    req: ApplicationCreate,
    principal: Principal = Depends(require_roles("job_seeker")),
    service: ApplicationService = Depends(get_application_service),
):
    application = service.create(principal, req.job_id, req.cover_letter)
    return ok("Application submitted successfully", application_to_response(application))


@router.get("/me", response_model=Envelope[list[ApplicationResponse]])
async def my_applications(
    status: StatusFilter | None = None,
    page: Page = Depends(page_params),
    principal: Principal = Depends(require_roles("job_seeker")),
    service: ApplicationService = Depends(get_application_service),
):
    rows, meta = service.list_for_seeker(principal, page, status)
    return ok("Applications retrieved successfully", [application_to_response(a) for a in rows], meta)


@router.get("/job/{job_id}", response_model=Envelope[list[ApplicationResponse]])
async def job_applications(
    job_id: int,
    status: StatusFilter | None = None,
    page: Page = Depends(page_params),
    principal: Principal = Depends(require_roles("employer")),
    service: ApplicationService = Depends(get_application_service),
):
    rows, meta = service.list_for_job(principal, job_id, page, status)
    return ok("Applications retrieved successfully", [application_to_response(a) for a in rows], meta)


@router.get("/{application_id}", response_model=Envelope[ApplicationResponse])
async def get_application(
    application_id: int,
    principal: Principal = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    application = service.get(application_id, principal)
    return ok("Application retrieved successfully", application_to_response(application))


@router.patch("/{application_id}/status", response_model=Envelope[ApplicationResponse])
async def update_application_status(
    application_id: int,
    req: ApplicationStatusUpdate,
    principal: Principal = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    application = service.transition(application_id, req.status, principal)
    return ok("Application status updated successfully", application_to_response(application))
