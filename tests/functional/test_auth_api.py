"""
API tests for the auth module.
Tests login, token expiry signalling, explicit refresh and sliding renewal.
"""

from datetime import timedelta

from fastapi.testclient import TestClient

from memobbs.auth.dependencies import RENEWAL_HEADER


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestLogin:
    def test_login_returns_token(self, client: TestClient, settings):
        response = client.post(
            "/api/auth/login", json={"username": settings.admin_username, "password": settings.admin_password}
        )
        assert response.status_code == 200
        assert response.json()["token"]

    def test_wrong_password(self, client: TestClient, settings):
        response = client.post("/api/auth/login", json={"username": settings.admin_username, "password": "nope"})
        assert response.status_code == 401

        body = response.json()
        assert "token" not in body
        assert body["code"] == "INVALID_CREDENTIALS"

    def test_missing_fields(self, client: TestClient):
        response = client.post("/api/auth/login", json={"username": "admin"})
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestTokenVerification:
    def test_verify(self, client: TestClient, admin_headers, settings):
        response = client.get("/api/auth/verify", headers=admin_headers)
        assert response.status_code == 200

        body = response.json()
        assert body["username"] == settings.admin_username
        assert "expiresAt" in body

    def test_garbage_token(self, client: TestClient):
        response = client.get("/api/auth/verify", headers=bearer("garbage"))
        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_INVALID"

    def test_foreign_signature(self, client: TestClient, token_factory):
        token = token_factory(secret="some-other-secret")
        response = client.get("/api/auth/verify", headers=bearer(token))
        assert response.json()["code"] == "TOKEN_INVALID"

    def test_expired_token_then_refreshed_token(self, client: TestClient, token_factory, sample_memos):
        memo_id = sample_memos[0].id
        expired = token_factory(issued_offset=-timedelta(hours=25))

        response = client.delete(f"/api/memos/{memo_id}", headers=bearer(expired))
        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_EXPIRED"

        still_valid = token_factory(issued_offset=-timedelta(hours=2))
        refreshed = client.post("/api/auth/refresh", headers=bearer(still_valid)).json()["token"]

        response = client.delete(f"/api/memos/{memo_id}", headers=bearer(refreshed))
        assert response.status_code == 200


class TestRefresh:
    def test_refresh_requires_token(self, client: TestClient):
        response = client.post("/api/auth/refresh")
        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_MISSING"

    def test_refresh_rejects_expired_token(self, client: TestClient, token_factory):
        expired = token_factory(issued_offset=-timedelta(hours=25))
        response = client.post("/api/auth/refresh", headers=bearer(expired))
        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_EXPIRED"

    def test_refreshed_token_is_new(self, client: TestClient, admin_token):
        response = client.post("/api/auth/refresh", headers=bearer(admin_token))
        assert response.status_code == 200
        assert response.json()["token"] != admin_token


class TestSlidingRenewal:
    def test_no_renewal_for_fresh_token(self, client: TestClient, admin_headers):
        response = client.get("/api/auth/verify", headers=admin_headers)
        assert RENEWAL_HEADER not in response.headers

    def test_renewal_header_near_expiry(self, client: TestClient, token_factory):
        stale = token_factory(issued_offset=-timedelta(hours=23, minutes=30))
        response = client.get("/api/auth/verify", headers=bearer(stale))
        assert response.status_code == 200

        renewed = response.headers[RENEWAL_HEADER]
        assert renewed != stale
        assert client.get("/api/auth/verify", headers=bearer(renewed)).status_code == 200

    def test_renewal_header_is_exposed_to_browsers(self, client: TestClient, admin_headers):
        response = client.get("/api/auth/verify", headers={**admin_headers, "Origin": "http://localhost:5173"})
        assert RENEWAL_HEADER.lower() in response.headers["access-control-expose-headers"].lower()
