from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    reviewee_id: int
    job_id: int
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)


class ReviewUpdate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)


class ReviewResponse(BaseModel):
    id: int
    reviewer_id: int
    reviewee_id: int
    job_id: int | None
    rating: int
    comment: str | None
    created_at: str
    updated_at: str
    reviewer_first_name: str | None = None
    reviewer_last_name: str | None = None
    reviewee_first_name: str | None = None
    reviewee_last_name: str | None = None
    job_title: str | None = None


class RatingSummary(BaseModel):
    average_rating: float | None
    total_reviews: int
