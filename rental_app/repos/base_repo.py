from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from core.get_db import Base
from models.utils import utc_now

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepo(Generic[ModelT]):
    """Single-table CRUD shared by the entity repos.

    Every write commits on success and rolls back before re-raising.
    """

    model: Type[ModelT]

    def __init__(self, db):
        self.db = db

    async def get_by_id(self, item_id: int) -> Optional[ModelT]:
        result = await self.db.execute(select(self.model).where(self.model.id == item_id))
        return result.scalar_one_or_none()

    async def list_all(self) -> List[ModelT]:
        result = await self.db.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def filter_by(self, column, value) -> List[ModelT]:
        result = await self.db.execute(
            select(self.model).where(column == value).order_by(self.model.id)
        )
        return list(result.scalars().all())

    async def count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def create(self, data: dict) -> ModelT:
        # one clock reading so a fresh row has updated_at == created_at
        now = utc_now()
        stamps = {"created_at": now}
        if hasattr(self.model, "updated_at"):
            stamps["updated_at"] = now
        item = self.model(**data, **stamps)
        self.db.add(item)
        return await self._commit_and_refresh(item)

    async def update(self, item_id: int, changes: dict[str, Any]) -> Optional[ModelT]:
        item = await self.get_by_id(item_id)
        if item is None:
            return None

        for field, value in changes.items():
            setattr(item, field, value)
        if hasattr(self.model, "updated_at"):
            item.updated_at = utc_now()

        return await self._commit_and_refresh(item)

    async def delete(self, item_id: int) -> bool:
        try:
            result = await self.db.execute(
                delete(self.model).where(self.model.id == item_id)
            )
            await self.db.commit()
            return result.rowcount > 0
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def _commit_and_refresh(self, item: ModelT) -> ModelT:
        try:
            await self.db.commit()
            await self.db.refresh(item)
            return item
        except SQLAlchemyError:
            await self.db.rollback()
            raise
