"""API router for the memos module."""

from typing import Annotated, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from memobbs.auth.dependencies import AdminDep
from memobbs.core.dependencies import SessionDep
from memobbs.core.errors import not_found
from memobbs.memos.dao import MemoDAO
from memobbs.memos.schemas import MemoCreate, MemoDeleted, MemoRead, MemoUpdate
from memobbs.memos.service import MemoService

router = APIRouter(prefix="/memos", tags=["Memos"])


def get_memo_service(session: SessionDep) -> MemoService:
    return MemoService(MemoDAO(session))


MemoServiceDep = Annotated[MemoService, Depends(get_memo_service)]


# --- Public routes ---


@router.get("", response_model=List[MemoRead])
def list_memos(service: MemoServiceDep) -> List[MemoRead]:
    """All memos, newest first."""
    return service.list_memos()


@router.get("/search", response_model=List[MemoRead])
def search_memos(
    service: MemoServiceDep,
    q: str = Query(..., min_length=1, max_length=200, description="Text to look for"),
    limit: Optional[int] = Query(None, ge=1, le=500),
) -> List[MemoRead]:
    return service.search(q, limit=limit)


@router.get("/date/{date}", response_model=List[MemoRead])
def list_memos_by_date(date: str, service: MemoServiceDep) -> List[MemoRead]:
    """Memos created on a given YYYY-MM-DD (UTC+8) date."""
    return service.list_by_date(date)


@router.get("/stats/{year}/{month}", response_model=Dict[str, int])
def get_monthly_stats(
    service: MemoServiceDep,
    year: int = Path(..., ge=1, le=9998),
    month: int = Path(..., ge=1, le=12),
) -> Dict[str, int]:
    """Memo count for every day of the month."""
    return service.monthly_stats(year, month)


@router.get("/{memo_id}", response_model=MemoRead)
def get_memo(memo_id: str, service: MemoServiceDep) -> MemoRead:
    memo = service.get_by_id(memo_id)
    if not memo:
        raise not_found("Memo not found")
    return memo


@router.post("", response_model=MemoRead)
def create_memo(memo: MemoCreate, service: MemoServiceDep) -> MemoRead:
    return service.create_memo(memo)


# --- Admin routes ---


@router.put("/{memo_id}", response_model=MemoRead)
def update_memo(memo_id: str, memo: MemoUpdate, service: MemoServiceDep, _: AdminDep) -> MemoRead:
    updated = service.update_memo(memo_id, memo)
    if not updated:
        raise not_found("Memo not found")
    return updated


@router.delete("/{memo_id}", response_model=MemoDeleted)
def delete_memo(memo_id: str, service: MemoServiceDep, _: AdminDep) -> MemoDeleted:
    if not service.delete_memo(memo_id):
        raise not_found("Memo not found")
    return MemoDeleted(message="Memo deleted successfully")
