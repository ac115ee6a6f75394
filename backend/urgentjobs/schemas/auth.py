from typing import Literal

from pydantic import BaseModel, EmailStr, Field, model_validator


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str | None = None
    role: Literal["job_seeker", "employer"]
    company_name: str | None = None

    @model_validator(mode="after")
    def _employer_needs_company(self):
        if self.role == "employer" and not (self.company_name or "").strip():
            raise ValueError("Company name is required for employers")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class PasswordUpdate(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class UserSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    company_name: str | None = None


class AuthResponse(BaseModel):
    user: UserSummary
    token: str
