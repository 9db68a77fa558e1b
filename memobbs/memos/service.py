"""Service layer for the memos module using BaseService."""

import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from memobbs.content import process_content
from memobbs.core import clock
from memobbs.core.base_service import BaseService
from memobbs.core.errors import bad_request, internal_error
from memobbs.memos.dao import MemoDAO
from memobbs.memos.models import OWNER_ID, Memo, Visibility
from memobbs.memos.schemas import MemoCreate, MemoRead, MemoUpdate

logger = logging.getLogger(__name__)


class MemoService(BaseService[Memo, MemoCreate, MemoUpdate, MemoRead]):
    """Memo service: content processing, timestamps and the calendar queries."""

    def __init__(self, dao: MemoDAO, now: Callable[[], str] = clock.now_iso):
        super().__init__(dao)
        self.memo_dao = dao
        self.now = now

    def _to_response(self, record: Memo) -> MemoRead:
        return MemoRead.model_validate(record)

    # ===== QUERIES =====

    def list_memos(self) -> List[MemoRead]:
        """All memos, newest first."""
        try:
            return [self._to_response(memo) for memo in self.memo_dao.get_all_memos()]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching memos: {e}")
            raise internal_error("Failed to fetch memos") from e

    def list_by_date(self, day: str) -> List[MemoRead]:
        """Memos created on one UTC+8 calendar day."""
        try:
            start, end = clock.day_bounds(clock.parse_date(day))
        except ValueError as e:
            raise bad_request("Invalid date, expected YYYY-MM-DD") from e

        try:
            memos = self.memo_dao.get_created_between(start, end)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching memos for {day}: {e}")
            raise internal_error("Failed to fetch memos") from e

        logger.info(f"Found {len(memos)} memos for date {day}")
        return [self._to_response(memo) for memo in memos]

    def search(self, term: str, limit: Optional[int] = None) -> List[MemoRead]:
        term = term.strip()
        if not term:
            raise bad_request("Search term cannot be empty")
        try:
            return [self._to_response(memo) for memo in self.memo_dao.search_text(term, limit=limit)]
        except SQLAlchemyError as e:
            logger.error(f"Error searching memos for {term!r}: {e}")
            raise internal_error("Failed to search memos") from e

    def monthly_stats(self, year: int, month: int) -> Dict[str, int]:
        """Per-day memo counts covering every day of the month."""
        if not 1 <= month <= 12:
            raise bad_request("Month must be between 1 and 12")
        if not 1 <= year <= 9998:
            raise bad_request("Year out of range")

        start, end = clock.month_bounds(year, month)
        try:
            counts = self.memo_dao.count_by_day(start, end)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching memo stats for {year}-{month:02d}: {e}")
            raise internal_error("Failed to fetch memo stats") from e

        stats = {day: 0 for day in clock.month_days(year, month)}
        for day, count in counts.items():
            if day in stats:
                stats[day] = count
        return stats

    # ===== MUTATIONS =====

    def create_memo(self, memo: MemoCreate) -> MemoRead:
        try:
            created = self.create(memo)
        except SQLAlchemyError as e:
            logger.error(f"Error creating memo: {e}")
            raise internal_error("Failed to create memo") from e
        logger.info(f"Memo {created.id} created")
        return created

    def update_memo(self, memo_id: str, memo: MemoUpdate) -> Optional[MemoRead]:
        try:
            return self.update(memo_id, memo)
        except SQLAlchemyError as e:
            logger.error(f"Error updating memo {memo_id}: {e}")
            raise internal_error("Failed to update memo") from e

    def delete_memo(self, memo_id: str) -> bool:
        try:
            return self.delete(memo_id)
        except SQLAlchemyError as e:
            logger.error(f"Error deleting memo {memo_id}: {e}")
            raise internal_error("Failed to delete memo") from e

    # ===== BASE SERVICE HOOKS =====

    def _content_columns(self, raw: str) -> Dict[str, Any]:
        processed = process_content(raw)
        return {
            "content_raw": processed.raw,
            "content_html": processed.html,
            "content_text": processed.text,
        }

    def _build_create_data(self, create_data: MemoCreate) -> Dict[str, Any]:
        timestamp = self.now()
        data = self._content_columns(create_data.content)
        data.update(
            resources=[r.model_dump() for r in create_data.resources],
            tags=list(create_data.tags),
            visibility=Visibility.PUBLIC,
            user_id=OWNER_ID,
            created_at=timestamp,
            updated_at=timestamp,
        )
        return data

    def _build_update_data(self, record: Memo, update_data: MemoUpdate) -> Dict[str, Any]:
        data = self._content_columns(update_data.content)
        data.update(
            resources=[r.model_dump() for r in update_data.resources],
            tags=list(update_data.tags),
            updated_at=self.now(),
        )
        return data

    def _validate_create(self, create_data: MemoCreate) -> None:
        if not create_data.content.strip():
            raise bad_request("Memo content cannot be empty")

    def _validate_update(self, record: Memo, update_data: MemoUpdate) -> None:
        if not update_data.content.strip():
            raise bad_request("Memo content cannot be empty")

    def _post_delete(self, record: Memo) -> None:
        logger.info(f"Memo {record.id} deleted")
