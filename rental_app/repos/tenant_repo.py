from typing import List, Optional, Tuple

from sqlalchemy import select

from models.models import Lease, Property, Tenant, User

from repos.base_repo import BaseRepo


class TenantRepo(BaseRepo[Tenant]):
    model = Tenant

    async def get_by_user(self, user_id: int) -> Tenant | None:
        result = await self.db.execute(
            select(Tenant).where(Tenant.user_id == user_id).order_by(Tenant.id).limit(1)
        )
        return result.scalars().first()

    @staticmethod
    def _owner_tenant_ids(owner_id: int):
        return (
            select(Lease.tenant_id)
            .join(Property, Property.id == Lease.property_id)
            .where(Property.owner_id == owner_id)
        )

    async def for_owner(self, owner_id: int) -> List[Tenant]:
        # IN over the lease subquery lists each tenant once
        result = await self.db.execute(
            select(Tenant)
            .where(Tenant.id.in_(self._owner_tenant_ids(owner_id)))
            .order_by(Tenant.id)
        )
        return list(result.scalars().all())

    async def with_user(self, tenant_id: int) -> Optional[Tuple[Tenant, User]]:
        result = await self.db.execute(
            select(Tenant, User)
            .join(User, User.id == Tenant.user_id)
            .where(Tenant.id == tenant_id)
        )
        row = result.first()
        return tuple(row) if row is not None else None

    async def all_with_users(self, owner_id: int | None = None) -> List[Tuple[Tenant, User]]:
        stmt = select(Tenant, User).join(User, User.id == Tenant.user_id)
        if owner_id is not None:
            stmt = stmt.where(Tenant.id.in_(self._owner_tenant_ids(owner_id)))
        result = await self.db.execute(stmt.order_by(Tenant.id))
        return [tuple(row) for row in result.all()]
