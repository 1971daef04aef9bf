"""
Tests for api.routes

Covers:
- Health and root endpoints
- Full session flow over HTTP
- Request validation (422), preconditions (400), invalid steps (409)
- Unknown sessions (404)
- Pipeline failure (500) with the status rolled back
- Paginated, filtered listing
"""

import pytest
from fastapi.testclient import TestClient

from image_foundry.main import create_app

from tests.fakes import FailingDescriber, make_orchestrator


@pytest.fixture
def client(store):
    with TestClient(create_app(make_orchestrator(store))) as test_client:
        yield test_client


def create(client, prompt="a red fox in snow") -> dict:
    response = client.post("/api/sessions", json={"user_prompt": prompt})
    assert response.status_code == 200
    return response.json()


class TestMeta:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Image Foundry"


class TestSessionFlow:
    def test_full_flow(self, client):
        session = create(client)
        assert session["status"] == "prompt"
        assert session["ai_description"] is None

        described = client.post(f"/api/sessions/{session['id']}/generate-description")
        assert described.status_code == 200
        assert described.json()["status"] == "feedback"
        assert "a red fox in snow" in described.json()["ai_description"]

        refined = client.post(
            f"/api/sessions/{session['id']}/refine-description",
            json={"user_feedback": "make it darker"},
        )
        assert refined.status_code == 200
        assert refined.json()["user_feedback"] == "make it darker"
        assert refined.json()["final_description"] == refined.json()["ai_description"]

        completed = client.post(f"/api/sessions/{session['id']}/generate-image")
        assert completed.status_code == 200
        body = completed.json()
        assert body["status"] == "completed"
        assert body["generated_image_url"] == "https://images.test/1.png"
        assert 50 <= body["energy_saved"] <= 79
        assert 30 <= body["time_saved"] <= 59

        fetched = client.get(f"/api/sessions/{session['id']}")
        assert fetched.json() == body


class TestErrors:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/api/sessions/999"),
            ("post", "/api/sessions/999/generate-description"),
            ("post", "/api/sessions/999/generate-image"),
        ],
    )
    def test_unknown_session(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"

    def test_unknown_session_refine(self, client):
        response = client.post("/api/sessions/999/refine-description", json={"user_feedback": "darker"})

        assert response.status_code == 404

    @pytest.mark.parametrize("body", [{}, {"user_prompt": ""}, {"user_prompt": "x" * 501}])
    def test_invalid_prompt(self, client, body):
        assert client.post("/api/sessions", json=body).status_code == 422

    def test_blank_prompt(self, client):
        response = client.post("/api/sessions", json={"user_prompt": "   "})

        assert response.status_code == 422
        assert client.get("/api/sessions").json()["total"] == 0

    def test_blank_feedback(self, client):
        session = create(client)
        client.post(f"/api/sessions/{session['id']}/generate-description")

        response = client.post(
            f"/api/sessions/{session['id']}/refine-description", json={"user_feedback": " \n "}
        )

        assert response.status_code == 422

    def test_empty_feedback(self, client):
        session = create(client)
        client.post(f"/api/sessions/{session['id']}/generate-description")

        response = client.post(
            f"/api/sessions/{session['id']}/refine-description", json={"user_feedback": ""}
        )

        assert response.status_code == 422

    def test_refine_before_description(self, client):
        session = create(client)

        response = client.post(
            f"/api/sessions/{session['id']}/refine-description", json={"user_feedback": "darker"}
        )

        assert response.status_code == 400

    def test_image_before_description(self, client):
        session = create(client)

        assert client.post(f"/api/sessions/{session['id']}/generate-image").status_code == 400

    def test_describe_twice(self, client):
        session = create(client)
        client.post(f"/api/sessions/{session['id']}/generate-description")

        response = client.post(f"/api/sessions/{session['id']}/generate-description")

        assert response.status_code == 409
        assert "feedback" in response.json()["detail"]

    def test_pipeline_failure_rolls_back(self, store):
        app = create_app(make_orchestrator(store, describer=FailingDescriber()))
        with TestClient(app) as client:
            session = create(client)

            response = client.post(f"/api/sessions/{session['id']}/generate-description")

            assert response.status_code == 500
            assert response.json()["detail"] == "Failed to generate description. Please try again."
            assert client.get(f"/api/sessions/{session['id']}").json()["status"] == "prompt"


class TestListing:
    def test_pagination(self, client):
        for i in range(5):
            create(client, f"prompt {i}")

        response = client.get("/api/sessions", params={"page": 2, "per_page": 2})

        body = response.json()
        assert body["total"] == 5
        assert body["page"] == 2
        assert body["per_page"] == 2
        assert [s["user_prompt"] for s in body["items"]] == ["prompt 2", "prompt 1"]

    def test_status_filter(self, client):
        first = create(client, "a cat")
        create(client, "a dog")
        client.post(f"/api/sessions/{first['id']}/generate-description")

        body = client.get("/api/sessions", params={"status": "feedback"}).json()

        assert body["total"] == 1
        assert body["items"][0]["id"] == first["id"]

    def test_invalid_query(self, client):
        assert client.get("/api/sessions", params={"status": "archived"}).status_code == 422
        assert client.get("/api/sessions", params={"per_page": 0}).status_code == 422
