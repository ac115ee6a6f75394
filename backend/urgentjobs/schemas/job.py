from typing import Literal

from pydantic import BaseModel, Field, field_validator

PayType = Literal["hourly", "fixed", "daily"]
Urgency = Literal["immediate", "today", "this_week", "flexible"]
JobStatus = Literal["active", "filled", "expired", "draft"]


class JobCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    requirements: str | None = None
    pay_amount: float = Field(ge=0)
    pay_type: PayType
    location_latitude: float | None = Field(None, ge=-90, le=90)
    location_longitude: float | None = Field(None, ge=-180, le=180)
    location_address: str = Field(min_length=1)
    urgency: Urgency
    category: str = Field(min_length=1)
    start_date: str | None = None
    end_date: str | None = None
    estimated_hours: int | None = Field(None, ge=0)
    status: JobStatus = "active"


class JobUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    requirements: str | None = None
    pay_amount: float | None = Field(None, ge=0)
    pay_type: PayType | None = None
    location_latitude: float | None = Field(None, ge=-90, le=90)
    location_longitude: float | None = Field(None, ge=-180, le=180)
    location_address: str | None = None
    urgency: Urgency | None = None
    category: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    estimated_hours: int | None = Field(None, ge=0)
    status: JobStatus | None = None

    @field_validator("title", "description", "location_address", "status")
    @classmethod
    def _not_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class JobStatusUpdate(BaseModel):
    status: JobStatus


class JobResponse(BaseModel):
    id: int
    employer_id: int
    title: str
    description: str
    requirements: str | None
    pay_amount: float | None
    pay_type: str | None
    location_latitude: float | None
    location_longitude: float | None
    location_address: str
    urgency: str | None
    category: str | None
    start_date: str | None
    end_date: str | None
    estimated_hours: int | None
    status: str
    created_at: str
    updated_at: str
    company_name: str | None = None
    application_count: int = 0


class AdminJobResponse(JobResponse):
    company_logo: str | None = None
    company_website: str | None = None
    employer_first_name: str | None = None
    employer_last_name: str | None = None
    employer_email: str | None = None
