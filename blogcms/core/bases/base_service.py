from typing import Any, Dict, Generic, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlmodel import SQLModel

from blogcms.core import exceptions
from blogcms.core.bases.base_repository import BaseRepository, DuplicateError

T = TypeVar("T", bound=SQLModel)
S = TypeVar("S", bound=BaseModel)


class BaseService(Generic[T]):
    """Business rules shared by every app service.

    Services translate repository outcomes into API errors: a missing row
    becomes NotFoundException, a unique-constraint hit becomes
    ConflictException. Other repository failures propagate and are answered
    as internal errors by the global handler.
    """

    item_name: str = "Item"

    def __init__(self, repository: BaseRepository[T]):
        self.repository = repository

    def _parse(self, schema: Type[S], payload: Dict[str, Any]) -> S:
        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            raise exceptions.ValidationException(
                f"Invalid {self.item_name.lower()} data",
                error_details=exceptions.error_details_from(e.errors()),
            )

    def _not_found(self) -> exceptions.NotFoundException:
        return exceptions.NotFoundException(f"{self.item_name} not found")

    async def get_by_id(self, item_id: Any) -> Dict[str, Any]:
        item = await self.repository.get(item_id)
        if item is None:
            raise self._not_found()
        return {"data": item, "message": f"{self.item_name} retrieved successfully"}

    async def create(self, create_data: Dict[str, Any]) -> Dict[str, Any]:
        await self._validate_create(create_data)
        try:
            item = await self.repository.create(create_data)
        except DuplicateError:
            raise exceptions.ConflictException(f"{self.item_name} already exists")
        return {"data": item, "message": f"{self.item_name} created successfully"}

    async def update(self, item_id: Any, update_data: Dict[str, Any]) -> Dict[str, Any]:
        existing = await self.repository.get(item_id)
        if existing is None:
            raise self._not_found()
        await self._validate_update(item_id, update_data, existing)

        try:
            item = await self.repository.update(item_id, update_data)
        except DuplicateError:
            raise exceptions.ConflictException(f"{self.item_name} already exists")
        if item is None:
            raise self._not_found()
        return {"data": item, "message": f"{self.item_name} updated successfully"}

    async def force_delete(self, item_id: Any) -> Dict[str, Any]:
        item = await self.repository.force_delete(item_id)
        if item is None:
            raise self._not_found()
        return {"data": item, "message": f"{self.item_name} deleted successfully"}

    async def count(self, **filters) -> Dict[str, Any]:
        total = await self.repository.count(**filters)
        return {"data": total, "message": f"{self.item_name} count retrieved successfully"}

    async def _validate_create(self, create_data: Dict[str, Any]) -> None:
        """Validate data before creation."""
        pass

    async def _validate_update(
        self, item_id: Any, update_data: Dict[str, Any], existing_item: T
    ) -> None:
        """Validate data before update."""
        pass
