"""Persists request log entries to the database."""

import getpass
import json
import logging
import os
import platform
import socket
from datetime import datetime
from typing import Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from memobbs.logging.models import Log

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-new-token"})
# Bodies on these paths carry credentials or tokens
REDACTED_BODY_PATHS = ("/api/auth/login", "/api/auth/refresh")
MAX_BODY_CHARS = 10_000


def _current_user() -> str:
    try:
        return os.environ.get("USER") or os.environ.get("USERNAME") or getpass.getuser() or "unknown_user"
    except (KeyError, OSError):
        return "unknown_user"


def _current_host() -> str:
    try:
        return socket.gethostname() or platform.node() or "unknown_host"
    except OSError:
        return "unknown_host"


def headers_to_json(headers: Mapping[str, str]) -> str:
    return json.dumps(
        {k: (REDACTED if k.lower() in SENSITIVE_HEADERS else v) for k, v in headers.items()}
    )


def loggable_body(path: str, content_type: str, body: bytes) -> Optional[str]:
    if not body:
        return None
    if path in REDACTED_BODY_PATHS:
        return REDACTED
    if content_type.startswith("multipart/"):
        return f"[multipart body, {len(body)} bytes]"
    text = body.decode("utf-8", errors="ignore")
    if len(text) > MAX_BODY_CHARS:
        return text[:MAX_BODY_CHARS] + "...[truncated]"
    return text


class RequestLogRecorder:
    """Writes ``Log`` rows using its own short-lived sessions."""

    def __init__(self, session_factory: sessionmaker, application_id: str):
        self.session_factory = session_factory
        self.application_id = application_id
        self.username = _current_user()
        self.hostname = _current_host()

    def record(
        self,
        method: str,
        path: str,
        status_code: int,
        client_ip: Optional[str] = None,
        request_headers: Optional[str] = None,
        request_body: Optional[str] = None,
        response_body: Optional[str] = None,
        processing_time: Optional[float] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """Store one entry. Failures are reported but never raised to the request."""
        entry = Log(
            timestamp=datetime.now(),
            method=method,
            path=path,
            status_code=status_code,
            client_ip=client_ip,
            request_headers=request_headers,
            request_body=request_body,
            response_body=response_body,
            processing_time=processing_time,
            user_agent=user_agent,
            username=self.username,
            hostname=self.hostname,
            application_id=self.application_id,
        )
        try:
            with self.session_factory() as session:
                session.add(entry)
                session.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Error logging request {method} {path}: {e}")
