# memobbs/logging/router.py
"""Admin-only API router for the request log."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from memobbs.auth.dependencies import AdminDep
from memobbs.core.dependencies import SessionDep
from memobbs.logging.dao import LogDAO
from memobbs.logging.schemas import LogRead
from memobbs.logging.service import LogService

router = APIRouter(prefix="/logs", tags=["Logs"])


def get_log_service(session: SessionDep) -> LogService:
    return LogService(LogDAO(session))


@router.get("", response_model=List[LogRead])
def get_logs(
    response: Response,
    _: AdminDep,
    limit: int = Query(50, ge=1, le=1000, description="Maximum number of logs to return"),
    offset: int = Query(0, ge=0, description="Number of logs to skip"),
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    log_service: LogService = Depends(get_log_service),
) -> List[LogRead]:
    """Most recent request log entries."""
    logs = log_service.get_recent_logs(limit=limit, offset=offset, hours=hours)
    response.headers["X-Page-Size"] = str(limit)
    response.headers["X-Page-Offset"] = str(offset)
    return logs


@router.get("/errors", response_model=List[LogRead])
def get_error_logs(
    _: AdminDep,
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of error logs"),
    log_service: LogService = Depends(get_log_service),
) -> List[LogRead]:
    """Get error logs (4xx and 5xx status codes)."""
    return log_service.get_error_logs(hours=hours, limit=limit)
