"""Request/response logging middleware writing to the ``log`` table."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.background import BackgroundTask
from starlette.middleware.base import BaseHTTPMiddleware

from memobbs.logging.recorder import REDACTED, REDACTED_BODY_PATHS, headers_to_json, loggable_body

# Paths that should never be logged
EXCLUDED_PATHS = ("/api/logs", "/uploads", "/api/docs", "/api/openapi.json", "/api/redoc")


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        if request.url.path.startswith(EXCLUDED_PATHS):
            return await call_next(request)

        start_time = time.time()

        body_bytes = await request.body()

        # Replay the consumed body for the downstream app
        async def receive() -> dict:
            return {"type": "http.request", "body": body_bytes, "more_body": False}

        request = Request(request.scope, receive=receive)

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        status_code = response.status_code
        content_type = response.headers.get("content-type", "")

        # call_next always returns a streaming response; buffer it so the body can be logged
        chunks = []
        async for chunk in response.body_iterator:
            chunks.append(chunk)
        response_body = b"".join(chunks)

        if request.url.path in REDACTED_BODY_PATHS and status_code < 400:
            body_to_log = REDACTED
        elif "application/json" in content_type or status_code >= 400:
            body_to_log = response_body.decode("utf-8", errors="ignore")
        else:
            body_to_log = f"[{content_type or 'unknown'} body not logged]"

        recorder = request.app.state.log_recorder

        def log_to_db():
            recorder.record(
                method=request.method,
                path=str(request.url.path),
                status_code=status_code,
                client_ip=request.client.host if request.client else None,
                request_headers=headers_to_json(request.headers),
                request_body=loggable_body(
                    request.url.path, request.headers.get("content-type", ""), body_bytes
                ),
                response_body=body_to_log,
                processing_time=duration_ms,
                user_agent=request.headers.get("user-agent"),
            )

        logged = Response(content=response_body, status_code=status_code, background=BackgroundTask(log_to_db))
        # Raw pairs keep repeated headers such as Set-Cookie
        logged.raw_headers = list(response.raw_headers)
        return logged
