# memobbs/core/base_service.py
"""Generic base service for business logic orchestration."""

from abc import ABC
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

from memobbs.core.base_dao import BaseDAO

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)


class BaseService(Generic[ModelType, CreateSchemaType, UpdateSchemaType, ResponseSchemaType], ABC):
    """Generic service for business logic orchestration."""

    def __init__(self, dao: BaseDAO[ModelType]):
        self.dao = dao

    def get_by_id(self, id: Any) -> Optional[ResponseSchemaType]:
        """Get record by ID with business logic applied."""
        record = self.dao.get_by_id(id)
        if record:
            return self._to_response(record)
        return None

    def create(self, create_data: CreateSchemaType, **extra_data) -> ResponseSchemaType:
        """Create new record with validation and business logic."""
        self._validate_create(create_data)

        data = self._build_create_data(create_data)
        data.update(extra_data)

        record = self.dao.create(**data)

        self._post_create(record, create_data)

        return self._to_response(record)

    def update(self, id: Any, update_data: UpdateSchemaType, **extra_data) -> Optional[ResponseSchemaType]:
        """Update existing record with validation and business logic."""
        record = self.dao.get_by_id(id)
        if not record:
            return None

        self._validate_update(record, update_data)

        data = self._build_update_data(record, update_data)
        data.update(extra_data)

        updated_record = self.dao.update(record, **data)

        self._post_update(updated_record, update_data)

        return self._to_response(updated_record)

    def delete(self, id: Any) -> bool:
        """Delete record with business logic."""
        record = self.dao.get_by_id(id)
        if not record:
            return False

        self._validate_delete(record)

        success = self.dao.delete(id)

        if success:
            self._post_delete(record)

        return success

    def count(self, **filters) -> int:
        """Count records with filters."""
        return self.dao.count(**filters)

    # ===== OVERRIDABLE HOOKS =====

    def _to_response(self, record: ModelType) -> ResponseSchemaType:
        """Convert database model to response schema."""
        if hasattr(self, "response_model"):
            return self.response_model.model_validate(record)
        raise NotImplementedError("Must implement _to_response or set response_model")

    def _build_create_data(self, create_data: CreateSchemaType) -> Dict[str, Any]:
        """Column values for a new record. Override when schema and model differ."""
        return create_data.model_dump()

    def _build_update_data(self, record: ModelType, update_data: UpdateSchemaType) -> Dict[str, Any]:
        """Column values to change. Override when schema and model differ."""
        return update_data.model_dump(exclude_unset=True)

    def _validate_create(self, create_data: CreateSchemaType) -> None:
        """Validate data before creation. Override for custom validation."""
        pass

    def _validate_update(self, record: ModelType, update_data: UpdateSchemaType) -> None:
        """Validate data before update. Override for custom validation."""
        pass

    def _validate_delete(self, record: ModelType) -> None:
        """Validate before deletion. Override for custom validation."""
        pass

    def _post_create(self, record: ModelType, create_data: CreateSchemaType) -> None:
        """Business logic after creation. Override for side effects."""
        pass

    def _post_update(self, record: ModelType, update_data: UpdateSchemaType) -> None:
        """Business logic after update. Override for side effects."""
        pass

    def _post_delete(self, record: ModelType) -> None:
        """Business logic after deletion. Override for side effects."""
        pass
