from pydantic import BaseModel


class ApplicationCreate(BaseModel):
    job_id: int
    cover_letter: str | None = None


class ApplicationStatusUpdate(BaseModel):
    # Membership is checked by the status engine so it can answer with
    # its own error.
    status: str


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    job_seeker_id: int
    cover_letter: str | None
    status: str
    created_at: str
    updated_at: str
    job_title: str | None = None
    company_name: str | None = None
    seeker_first_name: str | None = None
    seeker_last_name: str | None = None
