import itertools

import pytest
from fastapi.testclient import TestClient

from urgentjobs.database import get_engine, get_session_factory, init_db, make_session_factory
from urgentjobs.main import app
from urgentjobs.models.user import User
from urgentjobs.utils.clock import utc_now
from urgentjobs.utils.security import hash_password

_emails = itertools.count(1)

JOB_PAYLOAD = {
    "title": "Warehouse helper",
    "description": "Unload two trucks this afternoon",
    "requirements": "Able to lift 20kg",
    "pay_amount": 18.5,
    "pay_type": "hourly",
    "location_latitude": 52.52,
    "location_longitude": 13.405,
    "location_address": "Alexanderplatz 1, Berlin",
    "urgency": "today",
    "category": "logistics",
    "estimated_hours": 4,
}


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "urgent_jobs.sqlite"


@pytest.fixture
def session_factory(db_path):
    init_db(db_path)
    engine = get_engine(db_path)
    factory = make_session_factory(engine)
    app.dependency_overrides[get_session_factory] = lambda: factory
    yield factory
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def client(session_factory):
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a user through the API; returns {"id", "token", "headers", ...}."""

    def _register(role="job_seeker", first_name="Test", last_name="User", **extra):
        payload = {
            "email": f"user{next(_emails)}@example.com",
            "password": "secret123",
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
        }
        if role == "employer":
            payload["company_name"] = "Acme Logistics"
        payload.update(extra)
        r = client.post("/api/auth/register", json=payload)
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        return {
            "id": data["user"]["id"],
            "email": payload["email"],
            "token": data["token"],
            "headers": auth(data["token"]),
        }

    return _register


@pytest.fixture
def employer(register):
    return register("employer", first_name="Erin", last_name="Boss")


@pytest.fixture
def seeker(register):
    return register("job_seeker", first_name="Sam", last_name="Seeker")


@pytest.fixture
def admin(client, session_factory):
    """Admins cannot self-register; insert one and log in."""
    now = utc_now()
    with session_factory() as db:
        user = User(
            email="admin@example.com",
            password_hash=hash_password("adminpass"),
            first_name="Ada",
            last_name="Admin",
            role="admin",
            active=True,
            created_at=now,
            updated_at=now,
        )
        db.add(user)
        db.commit()
        user_id = user.id
    r = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert r.status_code == 200, r.text
    token = r.json()["data"]["token"]
    return {"id": user_id, "token": token, "headers": auth(token)}


@pytest.fixture
def create_job(client):
    def _create_job(owner, **overrides):
        r = client.post("/api/jobs", json={**JOB_PAYLOAD, **overrides}, headers=owner["headers"])
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _create_job


@pytest.fixture
def apply(client):
    def _apply(applicant, job_id, cover_letter="Available right now"):
        r = client.post(
            "/api/applications",
            json={"job_id": job_id, "cover_letter": cover_letter},
            headers=applicant["headers"],
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _apply
