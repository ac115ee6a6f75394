import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from urgentjobs.errors import Conflict, Forbidden, InvalidInput, NotFound
from urgentjobs.models.application import Application
from urgentjobs.models.job import Job
from urgentjobs.models.review import Review
from urgentjobs.models.user import JobSeekerProfile, User
from urgentjobs.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from urgentjobs.services.authorization import Principal
from urgentjobs.services.notification_service import NotificationDispatcher
from urgentjobs.utils.clock import utc_now
from urgentjobs.utils.pagination import Page, paginate

logger = logging.getLogger(__name__)


def review_to_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        reviewer_id=review.reviewer_id,
        reviewee_id=review.reviewee_id,
        job_id=review.job_id,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
        updated_at=review.updated_at,
        reviewer_first_name=review.reviewer.first_name if review.reviewer else None,
        reviewer_last_name=review.reviewer.last_name if review.reviewer else None,
        reviewee_first_name=review.reviewee.first_name if review.reviewee else None,
        reviewee_last_name=review.reviewee.last_name if review.reviewee else None,
        job_title=review.job.title if review.job else None,
    )


class ReviewService:
    def __init__(self, db: Session, notifier: NotificationDispatcher):
        self.db = db
        self.notifier = notifier

    def get(self, review_id: int) -> Review:
        review = self.db.get(Review, review_id)
        if review is None:
            raise NotFound("Review not found")
        return review

    def for_user(self, user_id: int, page: Page, given: bool = False):
        column = Review.reviewer_id if given else Review.reviewee_id
        query = self.db.query(Review).filter(column == user_id).order_by(Review.created_at.desc(), Review.id.desc())
        return paginate(query, page)

    def for_job(self, job_id: int, page: Page):
        query = self.db.query(Review).filter(Review.job_id == job_id).order_by(Review.created_at.desc(), Review.id.desc())
        return paginate(query, page)

    def rating_summary(self, user_id: int) -> dict:
        average, total = (
            self.db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.reviewee_id == user_id)
            .one()
        )
        return {
            "average_rating": round(float(average), 1) if average is not None else None,
            "total_reviews": total,
        }

    def _worked_together(self, job: Job, user_a: int, user_b: int) -> bool:
        """True when one side employed the other through an accepted application on ``job``."""
        employer_user_id = job.employer.user_id
        accepted_seekers = {
            row.user_id
            for row in self.db.query(JobSeekerProfile.user_id)
            .join(Application, Application.job_seeker_id == JobSeekerProfile.id)
            .filter(Application.job_id == job.id, Application.status == "accepted")
        }
        return (user_a == employer_user_id and user_b in accepted_seekers) or (
            user_b == employer_user_id and user_a in accepted_seekers
        )

    def create(self, actor: Principal, req: ReviewCreate) -> Review:
        if req.reviewee_id == actor.id:
            raise InvalidInput("You cannot review yourself")
        if self.db.get(User, req.reviewee_id) is None:
            raise NotFound("User not found")
        job = self.db.get(Job, req.job_id)
        if job is None:
            raise NotFound("Job not found")
        if not self._worked_together(job, actor.id, req.reviewee_id):
            raise InvalidInput("You can only review users you have worked with on this job")
        duplicate = (
            self.db.query(Review.id)
            .filter(
                Review.reviewer_id == actor.id,
                Review.reviewee_id == req.reviewee_id,
                Review.job_id == job.id,
            )
            .first()
        )
        if duplicate:
            raise Conflict("You have already reviewed this user for this job")

        now = utc_now()
        review = Review(
            reviewer_id=actor.id,
            reviewee_id=req.reviewee_id,
            job_id=job.id,
            rating=req.rating,
            comment=req.comment,
            created_at=now,
            updated_at=now,
        )
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        logger.info("Review %d created by user %d", review.id, actor.id)

        try:
            self.notifier.notify(req.reviewee_id, "new_review", {"rating": review.rating, "related_id": review.id})
        except Exception:
            logger.exception("Notification new_review for user %s failed", req.reviewee_id)
        return review

    def _editable(self, review_id: int, actor: Principal) -> Review:
        review = self.get(review_id)
        if review.reviewer_id != actor.id and actor.role != "admin":
            raise Forbidden("Not authorized to modify this review")
        return review

    def update(self, review_id: int, actor: Principal, req: ReviewUpdate) -> Review:
        review = self._editable(review_id, actor)
        review.rating = req.rating
        review.comment = req.comment
        review.updated_at = utc_now()
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete(self, review_id: int, actor: Principal) -> None:
        review = self._editable(review_id, actor)
        self.db.delete(review)
        self.db.commit()
