"""
API tests for the request log, health check and error handling.
"""

import dataclasses

import pytest
from fastapi import Response
from fastapi.testclient import TestClient

from memobbs.app import create_app
from memobbs.memos.service import MemoService


class TestRequestLog:
    def test_logs_require_admin(self, client: TestClient):
        assert client.get("/api/logs").status_code == 401

    def test_requests_are_recorded(self, client: TestClient, admin_headers):
        client.get("/api/memos")

        logs = client.get("/api/logs", headers=admin_headers).json()
        entry = next(log for log in logs if log["path"] == "/api/memos")
        assert entry["method"] == "GET"
        assert entry["status_code"] == 200
        assert entry["application_id"] == "memobbs"

    def test_log_reads_are_not_recorded(self, client: TestClient, admin_headers):
        client.get("/api/logs", headers=admin_headers)
        logs = client.get("/api/logs", headers=admin_headers).json()
        assert all(not log["path"].startswith("/api/logs") for log in logs)

    def test_secrets_are_redacted(self, client: TestClient, admin_headers, admin_token, settings):
        client.get("/api/auth/verify", headers=admin_headers)

        logs = client.get("/api/logs", headers=admin_headers).json()
        login = next(log for log in logs if log["path"] == "/api/auth/login")
        assert login["request_body"] == "[REDACTED]"
        assert login["response_body"] == "[REDACTED]"
        assert settings.admin_password not in (login["request_headers"] or "")

        verify = next(log for log in logs if log["path"] == "/api/auth/verify")
        assert admin_token not in verify["request_headers"]

    def test_error_logs(self, client: TestClient, admin_headers):
        client.get("/api/memos/unknown-id")
        client.get("/api/memos")

        errors = client.get("/api/logs/errors", headers=admin_headers).json()
        assert errors
        assert all(log["status_code"] >= 400 for log in errors)
        assert any(log["path"] == "/api/memos/unknown-id" for log in errors)

    def test_repeated_headers_survive_logging(self, app):
        @app.get("/api/cookie-pair")
        def cookie_pair(response: Response):
            response.set_cookie("first", "1")
            response.set_cookie("second", "2")
            return {"ok": True}

        with TestClient(app) as client:
            response = client.get("/api/cookie-pair")
        assert response.status_code == 200
        cookies = response.headers.get_list("set-cookie")
        assert len(cookies) == 2
        assert cookies[0].startswith("first=1")
        assert cookies[1].startswith("second=2")


class TestHealth:
    def test_health(self, client: TestClient):
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("+08:00")


class TestErrorHandling:
    @pytest.fixture
    def broken_listing(self, monkeypatch):
        def explode(self):
            raise RuntimeError("database on fire")

        monkeypatch.setattr(MemoService, "list_memos", explode)

    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_unhandled_error_shows_details_outside_production(self, app, broken_listing):
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/memos")
        assert response.status_code == 500

        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert body["details"] == "database on fire"
        assert "RuntimeError" in body["traceback"]

    def test_unhandled_error_is_logged(self, app, broken_listing, admin_headers):
        with TestClient(app, raise_server_exceptions=False) as client:
            client.get("/api/memos")
            errors = client.get("/api/logs/errors", headers=admin_headers).json()
        assert any(log["status_code"] == 500 and "database on fire" in log["response_body"] for log in errors)

    def test_production_hides_details(self, settings, broken_listing):
        app = create_app(dataclasses.replace(settings, environment="production"))
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/memos")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "code": "INTERNAL_ERROR"}
