# memobbs/logging/service.py
"""Read-only service over the request log."""

import logging
from typing import List

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from memobbs.core.base_service import BaseService
from memobbs.core.errors import internal_error
from memobbs.logging.dao import LogDAO
from memobbs.logging.models import Log
from memobbs.logging.schemas import LogRead

logger = logging.getLogger(__name__)


class LogService(BaseService[Log, BaseModel, BaseModel, LogRead]):
    """Retrieves request log entries for the admin."""

    response_model = LogRead

    def __init__(self, log_dao: LogDAO):
        super().__init__(log_dao)
        self.log_dao = log_dao

    def get_recent_logs(self, limit: int = 100, offset: int = 0, hours: int = 24) -> List[LogRead]:
        try:
            logs = self.log_dao.get_recent(limit=limit, offset=offset, hours=hours)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching logs: {e}")
            raise internal_error("Failed to fetch logs") from e
        return [self._to_response(log) for log in logs]

    def get_error_logs(self, limit: int = 100, hours: int = 24) -> List[LogRead]:
        """Get error logs (4xx and 5xx status codes)."""
        try:
            logs = self.log_dao.get_errors(limit=limit, hours=hours)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching error logs: {e}")
            raise internal_error("Failed to fetch error logs") from e
        return [self._to_response(log) for log in logs]
