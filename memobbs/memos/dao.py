"""Data Access Objects for the memos module using BaseDAO."""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from memobbs.core.base_dao import BaseDAO
from memobbs.memos.models import Memo


class MemoDAO(BaseDAO[Memo]):
    """Memo-specific DAO extending BaseDAO with ordering, range and aggregation queries."""

    def __init__(self, session: Session):
        super().__init__(Memo, session)

    def _newest_first(self, query):
        return query.order_by(Memo.created_at.desc(), Memo.id.desc())

    def get_all_memos(self, limit: Optional[int] = None) -> List[Memo]:
        """All memos, newest first."""
        query = self._newest_first(select(Memo))
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def get_created_between(self, start: str, end: str) -> List[Memo]:
        """Memos with ``start <= created_at < end``, newest first."""
        query = self._newest_first(
            select(Memo).where(Memo.created_at >= start, Memo.created_at < end)
        )
        return list(self.db.execute(query).scalars().all())

    def search_text(self, term: str, limit: Optional[int] = None) -> List[Memo]:
        """Case-insensitive substring search over the plain-text content."""
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        query = self._newest_first(
            select(Memo).where(Memo.content_text.ilike(f"%{escaped}%", escape="\\"))
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def count_by_day(self, start: str, end: str) -> Dict[str, int]:
        """Memo counts grouped by the date portion of ``created_at`` within ``[start, end)``."""
        day = func.substr(Memo.created_at, 1, 10).label("day")
        query = (
            select(day, func.count(Memo.id))
            .where(Memo.created_at >= start, Memo.created_at < end)
            .group_by(day)
            .order_by(day)
        )
        return {row[0]: row[1] for row in self.db.execute(query).all()}
