class TestJobsCRUD:
    def test_create_job(self, client, employer, create_job):
        job = create_job(employer)
        assert job["title"] == "Warehouse helper"
        assert job["status"] == "active"
        assert job["company_name"] == "Acme Logistics"
        assert job["application_count"] == 0

    def test_seeker_cannot_create_job(self, client, seeker):
        r = client.post("/api/jobs", json={
            "title": "x", "description": "y", "pay_amount": 10, "pay_type": "fixed",
            "location_address": "Somewhere", "urgency": "flexible", "category": "misc",
        }, headers=seeker["headers"])
        assert r.status_code == 403

    def test_create_requires_auth(self, client):
        r = client.post("/api/jobs", json={"title": "x"})
        assert r.status_code == 401

    def test_invalid_urgency_rejected(self, client, employer, create_job):
        r = client.post("/api/jobs", json={
            "title": "x", "description": "y", "pay_amount": 10, "pay_type": "fixed",
            "location_address": "Somewhere", "urgency": "yesterday", "category": "misc",
        }, headers=employer["headers"])
        assert r.status_code == 400
        assert "urgency" in r.json()["errors"]

    def test_get_job_is_public(self, client, employer, create_job):
        job = create_job(employer)
        r = client.get(f"/api/jobs/{job['id']}")
        assert r.status_code == 200
        assert r.json()["data"]["company_name"] == "Acme Logistics"

    def test_get_missing_job(self, client):
        r = client.get("/api/jobs/999")
        assert r.status_code == 404
        assert r.json()["success"] is False

    def test_update_job(self, client, employer, create_job):
        job = create_job(employer)
        r = client.put(f"/api/jobs/{job['id']}", json={"title": "Night shift helper"}, headers=employer["headers"])
        assert r.status_code == 200
        assert r.json()["data"]["title"] == "Night shift helper"
        assert r.json()["data"]["pay_amount"] == 18.5

    def test_other_employer_cannot_update(self, client, employer, register, create_job):
        job = create_job(employer)
        other = register("employer")
        r = client.put(f"/api/jobs/{job['id']}", json={"title": "Hijacked"}, headers=other["headers"])
        assert r.status_code == 404

    def test_delete_job(self, client, employer, create_job):
        job = create_job(employer)
        r = client.delete(f"/api/jobs/{job['id']}", headers=employer["headers"])
        assert r.status_code == 200
        r = client.get(f"/api/jobs/{job['id']}")
        assert r.status_code == 404

    def test_employer_listings(self, client, employer, register, create_job):
        create_job(employer, title="Mine 1")
        create_job(employer, title="Mine 2", status="draft")
        create_job(register("employer"), title="Someone else's")

        r = client.get("/api/jobs/employer/listings", headers=employer["headers"])
        assert r.status_code == 200
        assert r.json()["meta"]["total"] == 2

        r = client.get("/api/jobs/employer/listings?status=draft", headers=employer["headers"])
        assert [j["title"] for j in r.json()["data"]] == ["Mine 2"]


class TestJobSearch:
    def test_default_lists_active_only(self, client, employer, create_job):
        create_job(employer, title="Open")
        create_job(employer, title="Draft", status="draft")
        r = client.get("/api/jobs")
        assert r.status_code == 200
        body = r.json()
        assert [j["title"] for j in body["data"]] == ["Open"]
        assert body["meta"] == {"total": 1, "page": 1, "limit": 10, "pages": 1}

    def test_filters(self, client, employer, create_job):
        create_job(employer, title="Cheap", pay_amount=10, category="cleaning", urgency="immediate")
        create_job(employer, title="Mid", pay_amount=20, category="cleaning", pay_type="daily")
        create_job(employer, title="Pricey", pay_amount=40, category="events")

        r = client.get("/api/jobs?category=cleaning")
        assert {j["title"] for j in r.json()["data"]} == {"Cheap", "Mid"}

        r = client.get("/api/jobs?min_pay=15&max_pay=30")
        assert [j["title"] for j in r.json()["data"]] == ["Mid"]

        r = client.get("/api/jobs?urgency=immediate")
        assert [j["title"] for j in r.json()["data"]] == ["Cheap"]

        r = client.get("/api/jobs?pay_type=daily")
        assert [j["title"] for j in r.json()["data"]] == ["Mid"]

    def test_keyword_is_case_insensitive(self, client, employer, create_job):
        create_job(employer, title="Barista", description="Espresso bar needs help")
        create_job(employer, title="Mover", description="Carry boxes")
        r = client.get("/api/jobs?keyword=ESPRESSO")
        assert [j["title"] for j in r.json()["data"]] == ["Barista"]

    def test_keyword_is_not_sql(self, client, employer, create_job):
        create_job(employer)
        r = client.get("/api/jobs", params={"keyword": "' OR 1=1 --"})
        assert r.status_code == 200
        assert r.json()["data"] == []

    def test_radius(self, client, employer, create_job):
        # Berlin and Potsdam are about 27 km apart; Hamburg about 255 km.
        create_job(employer, title="Berlin", location_latitude=52.52, location_longitude=13.405)
        create_job(employer, title="Potsdam", location_latitude=52.3906, location_longitude=13.0645)
        create_job(employer, title="Hamburg", location_latitude=53.5511, location_longitude=9.9937)
        create_job(employer, title="Nowhere", location_latitude=None, location_longitude=None)

        r = client.get("/api/jobs?latitude=52.52&longitude=13.405&radius=50")
        assert {j["title"] for j in r.json()["data"]} == {"Berlin", "Potsdam"}

        r = client.get("/api/jobs?latitude=52.52&longitude=13.405&radius=5")
        assert [j["title"] for j in r.json()["data"]] == ["Berlin"]

    def test_sorting(self, client, employer, create_job):
        create_job(employer, title="B", pay_amount=30)
        create_job(employer, title="A", pay_amount=10)
        create_job(employer, title="C", pay_amount=20)

        r = client.get("/api/jobs?sort_by=pay_amount&sort_order=asc")
        assert [j["title"] for j in r.json()["data"]] == ["A", "C", "B"]

        r = client.get("/api/jobs?sort_by=title&sort_order=desc")
        assert [j["title"] for j in r.json()["data"]] == ["C", "B", "A"]

    def test_unknown_sort_rejected(self, client):
        r = client.get("/api/jobs?sort_by=password_hash")
        assert r.status_code == 400

    def test_pagination(self, client, employer, create_job):
        for i in range(5):
            create_job(employer, title=f"Job {i}")
        r = client.get("/api/jobs?page=2&limit=2")
        body = r.json()
        assert body["meta"] == {"total": 5, "page": 2, "limit": 2, "pages": 3}
        assert len(body["data"]) == 2

    def test_limit_capped(self, client):
        r = client.get("/api/jobs?limit=101")
        assert r.status_code == 400


class TestSearchEscaping:
    def test_wildcards_match_literally(self, client, employer, create_job):
        create_job(employer, title="100% remote packing")
        create_job(employer, title="Dog walker", description="Two dogs", requirements=None)

        r = client.get("/api/jobs", params={"keyword": "%"})
        assert [j["title"] for j in r.json()["data"]] == ["100% remote packing"]

        r = client.get("/api/jobs", params={"keyword": "_"})
        assert r.json()["data"] == []


class TestJobUpdateValidation:
    def test_null_required_field_rejected(self, client, employer, create_job):
        job = create_job(employer)
        r = client.put(f"/api/jobs/{job['id']}", json={"title": None}, headers=employer["headers"])
        assert r.status_code == 400
        assert "title" in r.json()["errors"]

    def test_nullable_field_can_be_cleared(self, client, employer, create_job):
        job = create_job(employer)
        r = client.put(f"/api/jobs/{job['id']}", json={"requirements": None}, headers=employer["headers"])
        assert r.status_code == 200
        assert r.json()["data"]["requirements"] is None
