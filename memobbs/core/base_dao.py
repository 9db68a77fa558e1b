# memobbs/core/base_dao.py
"""Generic base DAO for common database operations."""

from abc import ABC
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from memobbs.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseDAO(Generic[ModelType], ABC):
    """Generic DAO for common database operations."""

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def _filter_conditions(self, filters: dict) -> list:
        conditions = []
        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                conditions.append(getattr(self.model, key) == value)
        return conditions

    def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get record by primary key."""
        return self.db.get(self.model, id)

    def create(self, **data) -> ModelType:
        """Create new record."""
        db_obj = self.model(**data)
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, **data) -> ModelType:
        """Update existing record."""
        for field, value in data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: Any) -> bool:
        """Delete record by primary key."""
        db_obj = self.get_by_id(id)
        if db_obj:
            self.db.delete(db_obj)
            self.db.commit()
            return True
        return False

    def count(self, **filters) -> int:
        """Count records with optional filtering."""
        query = select(func.count()).select_from(self.model)
        conditions = self._filter_conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))
        return self.db.execute(query).scalar_one()
