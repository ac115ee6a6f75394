from pydantic import BaseModel, HttpUrl, field_validator


class BasicInfoUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    profile_picture: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class JobSeekerProfileUpdate(BaseModel):
    bio: str | None = None
    skills: list[str] | None = None
    experience_years: int | None = None
    education: str | None = None
    availability: str | None = None
    location_latitude: float | None = None
    location_longitude: float | None = None
    location_address: str | None = None


class EmployerProfileUpdate(BaseModel):
    company_name: str | None = None
    company_description: str | None = None
    company_website: HttpUrl | None = None
    company_logo: str | None = None
    industry: str | None = None
    location_latitude: float | None = None
    location_longitude: float | None = None
    location_address: str | None = None


class UserProfileResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: str | None
    profile_picture: str | None
    role: str
    active: bool
    created_at: str
    profile_id: int | None = None
    # job seeker
    bio: str | None = None
    skills: list[str] | None = None
    experience_years: int | None = None
    education: str | None = None
    availability: str | None = None
    # employer
    company_name: str | None = None
    company_description: str | None = None
    company_website: str | None = None
    company_logo: str | None = None
    industry: str | None = None
    # both
    location_latitude: float | None = None
    location_longitude: float | None = None
    location_address: str | None = None


class UserStatusUpdate(BaseModel):
    active: bool
