"""
Test configuration and shared fixtures for the memo board test suite.
Provides an application per test over a temporary SQLite file, admin tokens and seeded memos.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Generator, List

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from memobbs.app import create_app
from memobbs.auth.tokens import TokenManager
from memobbs.content import process_content
from memobbs.core.config import Settings
from memobbs.memos.dao import MemoDAO
from memobbs.memos.models import OWNER_ID, Memo, Visibility

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse-battery"
JWT_SECRET = "test-secret-please-ignore-0123456789"


# ===== APPLICATION SETUP =====


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database and upload directory"""
    return Settings(
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        jwt_secret=JWT_SECRET,
        database_url=f"sqlite:///{tmp_path / 'memobbs.db'}",
        upload_dir=str(tmp_path / "uploads"),
        server_url="http://testserver",
        environment="test",
    )


@pytest.fixture
def app(settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create test client for the application"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app) -> Generator[Session, None, None]:
    """Session on the same database the application uses"""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


# ===== AUTHENTICATION =====


@pytest.fixture
def token_factory(settings) -> Callable[..., str]:
    """Issue tokens as if minted at ``now + issued_offset``.

    ``issued_offset=-timedelta(hours=25)`` yields an expired token,
    ``-timedelta(hours=23, minutes=30)`` one inside the renewal window.
    """

    def make_token(
        issued_offset: timedelta = timedelta(0),
        username: str = ADMIN_USERNAME,
        secret: str = JWT_SECRET,
    ) -> str:
        manager = TokenManager(
            secret,
            ttl=timedelta(hours=settings.token_ttl_hours),
            clock=lambda: datetime.now(timezone.utc) + issued_offset,
        )
        return manager.issue(username)

    return make_token


@pytest.fixture
def admin_token(client) -> str:
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def admin_headers(admin_token) -> Dict[str, str]:
    """Authorization header for the logged-in admin"""
    return {"Authorization": f"Bearer {admin_token}"}


# ===== SAMPLE DATA =====


def make_memo(dao: MemoDAO, content: str, created_at: str, tags=None, resources=None) -> Memo:
    """Insert a memo with an explicit creation timestamp"""
    processed = process_content(content)
    return dao.create(
        content_raw=processed.raw,
        content_html=processed.html,
        content_text=processed.text,
        resources=resources or [],
        tags=tags or [],
        visibility=Visibility.PUBLIC,
        user_id=OWNER_ID,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def sample_memos(db_session) -> List[Memo]:
    """Memos around the February/March 2024 month boundary"""
    dao = MemoDAO(db_session)
    return [
        make_memo(dao, "Early leap day note", "2024-02-29T00:00:00.000+08:00", tags=["leap"]),
        make_memo(dao, "Late leap day note about **python**", "2024-02-29T23:59:59.999+08:00"),
        make_memo(dao, "March first, at midnight", "2024-03-01T00:00:00.000+08:00"),
        make_memo(dao, "Mid February note", "2024-02-14T12:30:00.000+08:00", tags=["valentine"]),
        make_memo(dao, "January note", "2024-01-31T23:59:59.999+08:00"),
    ]
