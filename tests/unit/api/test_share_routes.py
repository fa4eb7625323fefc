"""Tests for the shared-artifact routes."""

import pytest
from fastapi.testclient import TestClient


SNIPPET = {"language": "python", "prompt": "say hello", "code": "print('hello')"}


@pytest.fixture
def signed_in(client: TestClient) -> TestClient:
    client.post("/api/register", json={"username": "alice", "password": "secret123"})
    return client


class TestCreateShare:
    """Tests for POST /api/share."""

    def test_requires_session(self, client: TestClient) -> None:
        response = client.post("/api/share", json=SNIPPET)

        assert response.status_code == 401

    def test_publish(self, signed_in: TestClient) -> None:
        response = signed_in.post("/api/share", json=SNIPPET)

        assert response.status_code == 201
        assert response.headers["X-RateLimit-Remaining"] == "2"
        body = response.json()
        assert len(body["shareId"]) == 12
        assert body["ownerId"] == 1
        assert body["code"] == SNIPPET["code"]
        assert body["isPublic"] is True
        assert "expiresAt" in body

    def test_publish_consumes_quota(self, signed_in: TestClient) -> None:
        for _ in range(3):
            assert signed_in.post("/api/share", json=SNIPPET).status_code == 201

        response = signed_in.post("/api/share", json=SNIPPET)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert signed_in.get("/api/user").json()["rateLimitRemaining"] == 0

    def test_empty_code_rejected(self, signed_in: TestClient) -> None:
        response = signed_in.post("/api/share", json={**SNIPPET, "code": ""})

        assert response.status_code == 400


class TestReadShare:
    """Tests for GET /api/share/{share_id} and GET /api/user/shared."""

    def test_anyone_can_read(self, signed_in: TestClient) -> None:
        share_id = signed_in.post("/api/share", json=SNIPPET).json()["shareId"]
        signed_in.cookies.clear()

        response = signed_in.get(f"/api/share/{share_id}")

        assert response.status_code == 200
        assert response.json()["prompt"] == "say hello"

    def test_unknown_share(self, client: TestClient) -> None:
        response = client.get("/api/share/doesnotexist")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == (
            "Shared code not found or expired"
        )

    def test_expired_share(self, signed_in: TestClient, clock) -> None:
        share_id = signed_in.post("/api/share", json=SNIPPET).json()["shareId"]

        clock.advance(days=31)

        assert signed_in.get(f"/api/share/{share_id}").status_code == 404

    def test_list_own_shares(self, signed_in: TestClient, clock) -> None:
        first = signed_in.post("/api/share", json=SNIPPET).json()["shareId"]
        clock.advance(minutes=1)
        second = signed_in.post("/api/share", json=SNIPPET).json()["shareId"]

        response = signed_in.get("/api/user/shared")

        assert response.status_code == 200
        assert [a["shareId"] for a in response.json()] == [second, first]

    def test_list_requires_session(self, client: TestClient) -> None:
        assert client.get("/api/user/shared").status_code == 401
