from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from core.exceptions import DuplicateError
from models.models import User

from repos.base_repo import BaseRepo


class UserRepo(BaseRepo[User]):
    model = User

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(func.lower(User.username) == username.lower())
            .order_by(User.id)
            .limit(1)
        )
        return result.scalars().first()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(func.lower(User.email) == email.lower())
            .order_by(User.id)
            .limit(1)
        )
        return result.scalars().first()

    async def recent(self, limit: int) -> List[User]:
        if limit <= 0:
            return []
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc(), User.id.asc()).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, data: dict) -> User:
        try:
            return await super().create(data)
        except IntegrityError as exc:
            duplicate = await self._find_duplicate(data)
            if duplicate is None:
                raise
            raise duplicate from exc

    async def update(self, user_id: int, changes: dict) -> Optional[User]:
        try:
            return await super().update(user_id, changes)
        except IntegrityError as exc:
            duplicate = await self._find_duplicate(changes, exclude_id=user_id)
            if duplicate is None:
                raise
            raise duplicate from exc

    async def taken_by(
        self, field: str, value: str, exclude_id: int | None = None
    ) -> bool:
        column = getattr(User, field)
        stmt = select(User.id).where(func.lower(column) == value.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def _find_duplicate(
        self, data: dict, exclude_id: int | None = None
    ) -> DuplicateError | None:
        # the session was rolled back by _commit_and_refresh, so it is usable again
        for field in ("username", "email"):
            value = data.get(field)
            if value is not None and await self.taken_by(field, value, exclude_id):
                return DuplicateError("User", field, value)
        return None
