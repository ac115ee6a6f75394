from typing import Literal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from urgentjobs.database import get_db
from urgentjobs.dependencies import Principal, get_current_user, get_notifier
from urgentjobs.schemas.common import Envelope, ok
from urgentjobs.schemas.review import RatingSummary, ReviewCreate, ReviewResponse, ReviewUpdate
from urgentjobs.services.notification_service import NotificationDispatcher
from urgentjobs.services.review_service import ReviewService, review_to_response
from urgentjobs.utils.pagination import Page, page_params

router = APIRouter(prefix="/reviews", tags=["reviews"])


def get_review_service(
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> ReviewService:
    return ReviewService(db, notifier)


@router.get("/user/{user_id}", response_model=Envelope[list[ReviewResponse]])
async def reviews_for_user(
    user_id: int,
    type: Literal["received", "given"] = "received",
    page: Page = Depends(page_params),
    service: ReviewService = Depends(get_review_service),
):
    rows, meta = service.for_user(user_id, page, given=type == "given")
    return ok("Reviews retrieved successfully", [review_to_response(r) for r in rows], meta)


@router.get("/user/{user_id}/rating", response_model=Envelope[RatingSummary])
async def user_rating(user_id: int, service: ReviewService = Depends(get_review_service)):
    return ok("Rating retrieved successfully", service.rating_summary(user_id))


@router.get("/job/{job_id}", response_model=Envelope[list[ReviewResponse]])
async def reviews_for_job(
    job_id: int,
    page: Page = Depends(page_params),
    service: ReviewService = Depends(get_review_service),
):
    rows, meta = service.for_job(job_id, page)
    return ok("Reviews retrieved successfully", [review_to_response(r) for r in rows], meta)


@router.get("/{review_id}", response_model=Envelope[ReviewResponse])
async def get_review(review_id: int, service: ReviewService = Depends(get_review_service)):
    return ok("Review retrieved successfully", review_to_response(service.get(review_id)))


@router.post("", response_model=Envelope[ReviewResponse], status_code=201)
async def create_review(
    req: ReviewCreate,
    principal: Principal = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    review = service.create(principal, req)
    return ok("Review created successfully", review_to_response(review))


@router.put("/{review_id}", response_model=Envelope[ReviewResponse])
async def update_review(
    review_id: int,
    req: ReviewUpdate,
    principal: Principal = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    review = service.update(review_id, principal, req)
    return ok("Review updated successfully", review_to_response(review))


@router.delete("/{review_id}", response_model=Envelope[dict])
async def delete_review(
    review_id: int,
    principal: Principal = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    service.delete(review_id, principal)
    return ok("Review deleted successfully")
