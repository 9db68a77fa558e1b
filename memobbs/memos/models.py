"""Database models for the memos module."""

import enum
from typing import Any, Dict, List
from uuid import uuid4

from sqlalchemy import JSON, Enum as SQLEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from memobbs.core.database import Base

# There is exactly one owner; memos are never attributed to anyone else
OWNER_ID = "1"


class Visibility(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


def new_memo_id() -> str:
    return uuid4().hex


class Memo(Base):
    """A timestamped Markdown note.

    Resources are embedded as a JSON list of ``{url, name, type, size}``
    values and have no identity of their own.
    """

    __tablename__ = "memo"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_memo_id)

    content_raw: Mapped[str] = mapped_column(Text, nullable=False)
    content_html: Mapped[str] = mapped_column(Text, nullable=False)
    content_text: Mapped[str] = mapped_column(Text, nullable=False)

    resources: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    visibility: Mapped[Visibility] = mapped_column(
        SQLEnum(Visibility), nullable=False, default=Visibility.PUBLIC
    )
    user_id: Mapped[str] = mapped_column(String(50), nullable=False, default=OWNER_ID)

    # Fixed-width UTC+8 ISO strings; string order is chronological order
    created_at: Mapped[str] = mapped_column(String(29), nullable=False, index=True)
    updated_at: Mapped[str] = mapped_column(String(29), nullable=False)

    @property
    def content(self) -> Dict[str, str]:
        return {"raw": self.content_raw, "html": self.content_html, "text": self.content_text}
