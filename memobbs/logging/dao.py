# memobbs/logging/dao.py
"""Data access for the request log."""

from datetime import datetime, timedelta
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from memobbs.core.base_dao import BaseDAO
from memobbs.logging.models import Log


class LogDAO(BaseDAO[Log]):
    """DAO for Log operations using BaseDAO."""

    def __init__(self, db_session: Session):
        super().__init__(Log, db_session)

    def get_recent(self, limit: int = 100, offset: int = 0, hours: int = 24) -> List[Log]:
        """Newest entries inside the time window."""
        time_threshold = datetime.now() - timedelta(hours=hours)
        query = (
            select(self.model)
            .where(self.model.timestamp >= time_threshold)
            .order_by(self.model.timestamp.desc(), self.model.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all())

    def get_errors(self, limit: int = 100, hours: int = 24) -> List[Log]:
        """Entries with a 4xx or 5xx status inside the time window."""
        time_threshold = datetime.now() - timedelta(hours=hours)
        query = (
            select(self.model)
            .where(self.model.timestamp >= time_threshold, self.model.status_code >= 400)
            .order_by(self.model.timestamp.desc(), self.model.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all())
