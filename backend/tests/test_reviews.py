import pytest


class TestReviews:
    @pytest.fixture
    def hired(self, client, employer, seeker, create_job, apply):
        """An employer and seeker linked through an accepted application."""
        job = create_job(employer)
        application = apply(seeker, job["id"])
        r = client.patch(f"/api/applications/{application['id']}/status",
                         json={"status": "accepted"}, headers=employer["headers"])
        assert r.status_code == 200
        return job

    def _review(self, client, author, reviewee, job, rating=5, comment="Great work"):
        return client.post("/api/reviews", json={
            "reviewee_id": reviewee["id"],
            "job_id": job["id"],
            "rating": rating,
            "comment": comment,
        }, headers=author["headers"])

    def test_employer_reviews_worker(self, client, employer, seeker, hired):
        r = self._review(client, employer, seeker, hired)
        assert r.status_code == 201
        data = r.json()["data"]
        assert data["rating"] == 5
        assert data["job_title"] == "Warehouse helper"
        assert data["reviewer_first_name"] == "Erin"

        notes = client.get("/api/notifications", headers=seeker["headers"]).json()["data"]
        assert any(n["type"] == "new_review" for n in notes)

    def test_worker_reviews_employer(self, client, employer, seeker, hired):
        r = self._review(client, seeker, employer, hired, rating=4)
        assert r.status_code == 201

    def test_review_requires_accepted_application(self, client, employer, seeker, create_job, apply):
        job = create_job(employer)
        apply(seeker, job["id"])
        r = self._review(client, employer, seeker, job)
        assert r.status_code == 400
        assert "worked with" in r.json()["error"]

    def test_second_review_conflicts(self, client, employer, seeker, hired):
        assert self._review(client, employer, seeker, hired).status_code == 201
        r = self._review(client, employer, seeker, hired, rating=1)
        assert r.status_code == 400
        assert "already reviewed" in r.json()["error"]

    def test_rating_out_of_range(self, client, employer, seeker, hired):
        r = self._review(client, employer, seeker, hired, rating=6)
        assert r.status_code == 400
        assert "rating" in r.json()["errors"]

    def test_cannot_review_self(self, client, employer, hired):
        r = self._review(client, employer, employer, hired)
        assert r.status_code == 400

    def test_rating_summary(self, client, employer, seeker, register, hired):
        r = client.get(f"/api/reviews/user/{seeker['id']}/rating")
        assert r.json()["data"] == {"average_rating": None, "total_reviews": 0}

        self._review(client, employer, seeker, hired, rating=4)
        r = client.get(f"/api/reviews/user/{seeker['id']}/rating")
        assert r.json()["data"] == {"average_rating": 4.0, "total_reviews": 1}

    def test_listing(self, client, employer, seeker, hired):
        self._review(client, employer, seeker, hired)
        received = client.get(f"/api/reviews/user/{seeker['id']}").json()
        given = client.get(f"/api/reviews/user/{seeker['id']}?type=given").json()
        by_job = client.get(f"/api/reviews/job/{hired['id']}").json()
        assert received["meta"]["total"] == 1
        assert given["meta"]["total"] == 0
        assert by_job["meta"]["total"] == 1

    def test_update_and_delete_by_author(self, client, employer, seeker, hired):
        review = self._review(client, employer, seeker, hired).json()["data"]

        r = client.put(f"/api/reviews/{review['id']}", json={"rating": 3, "comment": "Fine"},
                       headers=employer["headers"])
        assert r.status_code == 200
        assert r.json()["data"]["rating"] == 3

        r = client.delete(f"/api/reviews/{review['id']}", headers=employer["headers"])
        assert r.status_code == 200
        assert client.get(f"/api/reviews/{review['id']}").status_code == 404

    def test_only_author_or_admin_may_edit(self, client, employer, seeker, admin, hired):
        review = self._review(client, employer, seeker, hired).json()["data"]

        r = client.put(f"/api/reviews/{review['id']}", json={"rating": 1, "comment": "Hmm"},
                       headers=seeker["headers"])
        assert r.status_code == 403

        r = client.delete(f"/api/reviews/{review['id']}", headers=admin["headers"])
        assert r.status_code == 200
