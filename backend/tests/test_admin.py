class TestAdminAccess:
    def test_non_admin_forbidden(self, client, employer, seeker):
        for actor in (employer, seeker):
            r = client.get("/api/admin/dashboard", headers=actor["headers"])
            assert r.status_code == 403

    def test_requires_token(self, client):
        assert client.get("/api/admin/users").status_code == 401


class TestAdminDashboard:
    def test_counts(self, client, admin, employer, seeker, create_job, apply):
        job = create_job(employer)
        create_job(employer, status="draft")
        apply(seeker, job["id"])

        r = client.get("/api/admin/dashboard", headers=admin["headers"])
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["users"] == {"job_seeker": 1, "employer": 1, "admin": 1}
        assert data["jobs"]["active"] == 1
        assert data["jobs"]["draft"] == 1
        assert data["applications"]["pending"] == 1
        assert data["new_users_last_7_days"] == 3
        assert len(data["recent_jobs"]) == 2


class TestAdminUsers:
    def test_list_and_search(self, client, admin, employer, seeker):
        r = client.get("/api/admin/users?role=employer", headers=admin["headers"])
        assert [u["id"] for u in r.json()["data"]] == [employer["id"]]

        r = client.get("/api/admin/users?search=acme", headers=admin["headers"])
        assert [u["id"] for u in r.json()["data"]] == [employer["id"]]

        r = client.get(f"/api/admin/users/{seeker['id']}", headers=admin["headers"])
        assert r.json()["data"]["first_name"] == "Sam"

    def test_deactivate_blocks_login_and_token(self, client, admin, seeker):
        r = client.patch(f"/api/admin/users/{seeker['id']}/status", json={"active": False},
                         headers=admin["headers"])
        assert r.status_code == 200
        assert r.json()["data"]["active"] is False

        assert client.get("/api/auth/me", headers=seeker["headers"]).status_code == 401
        r = client.post("/api/auth/login", json={"email": seeker["email"], "password": "secret123"})
        assert r.status_code == 401

        client.patch(f"/api/admin/users/{seeker['id']}/status", json={"active": True}, headers=admin["headers"])
        assert client.get("/api/auth/me", headers=seeker["headers"]).status_code == 200

    def test_cannot_deactivate_self(self, client, admin):
        r = client.patch(f"/api/admin/users/{admin['id']}/status", json={"active": False},
                         headers=admin["headers"])
        assert r.status_code == 400


class TestAdminJobs:
    def test_expire_rejects_pending(self, client, admin, employer, seeker, create_job, apply):
        job = create_job(employer)
        application = apply(seeker, job["id"])

        r = client.patch(f"/api/admin/jobs/{job['id']}/status", json={"status": "expired"},
                         headers=admin["headers"])
        assert r.status_code == 200
        assert r.json()["data"]["status"] == "expired"

        r = client.get(f"/api/admin/applications/{application['id']}", headers=admin["headers"])
        assert r.json()["data"]["status"] == "rejected"

    def test_list_and_delete(self, client, admin, employer, create_job):
        job = create_job(employer, title="Stage crew")
        r = client.get("/api/admin/jobs?search=stage", headers=admin["headers"])
        assert [j["id"] for j in r.json()["data"]] == [job["id"]]

        r = client.delete(f"/api/admin/jobs/{job['id']}", headers=admin["headers"])
        assert r.status_code == 200
        assert client.get(f"/api/jobs/{job['id']}").status_code == 404


class TestAdminJobDetail:
    def test_detail_includes_employer_contact(self, client, admin, employer, seeker, create_job, apply):
        job = create_job(employer)
        apply(seeker, job["id"])
        client.put("/api/users/profile/employer", json={"company_website": "https://acme.example.com"},
                   headers=employer["headers"])

        r = client.get(f"/api/admin/jobs/{job['id']}", headers=admin["headers"])
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["company_name"] == "Acme Logistics"
        assert data["company_website"].startswith("https://acme.example.com")
        assert data["employer_first_name"] == "Erin"
        assert data["employer_email"] == employer["email"]
        assert data["application_count"] == 1

    def test_missing_job(self, client, admin):
        assert client.get("/api/admin/jobs/999", headers=admin["headers"]).status_code == 404

    def test_search_wildcard_is_literal(self, client, admin, employer, create_job):
        create_job(employer, title="Stage crew")
        r = client.get("/api/admin/jobs", params={"search": "%"}, headers=admin["headers"])
        assert r.json()["data"] == []


class TestAdminApplications:
    def test_list_filters(self, client, admin, employer, seeker, register, create_job, apply):
        first = create_job(employer)
        second = create_job(employer)
        apply(seeker, first["id"])
        apply(register("job_seeker"), second["id"])

        r = client.get(f"/api/admin/applications?job_id={first['id']}", headers=admin["headers"])
        assert r.json()["meta"]["total"] == 1
        r = client.get("/api/admin/applications?status=pending", headers=admin["headers"])
        assert r.json()["meta"]["total"] == 2

    def test_admin_accept_goes_through_cascade(self, client, admin, employer, register, create_job, apply):
        job = create_job(employer)
        chosen = apply(register("job_seeker"), job["id"])
        other = apply(register("job_seeker"), job["id"])

        r = client.patch(f"/api/admin/applications/{chosen['id']}/status", json={"status": "accepted"},
                         headers=admin["headers"])
        assert r.status_code == 200

        r = client.get(f"/api/admin/applications/{other['id']}", headers=admin["headers"])
        assert r.json()["data"]["status"] == "rejected"
        assert client.get(f"/api/jobs/{job['id']}").json()["data"]["status"] == "filled"
