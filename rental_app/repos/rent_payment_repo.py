from typing import List

from sqlalchemy import select

from models.models import Lease, Property, RentPayment

from repos.base_repo import BaseRepo


class RentPaymentRepo(BaseRepo[RentPayment]):
    model = RentPayment

    async def for_lease(self, lease_id: int) -> List[RentPayment]:
        return await self.filter_by(RentPayment.lease_id, lease_id)

    async def for_tenant(self, tenant_id: int) -> List[RentPayment]:
        return await self.filter_by(RentPayment.tenant_id, tenant_id)

    async def for_owner(self, owner_id: int) -> List[RentPayment]:
        owner_leases = (
            select(Lease.id)
            .join(Property, Property.id == Lease.property_id)
            .where(Property.owner_id == owner_id)
        )
        result = await self.db.execute(
            select(RentPayment)
            .where(RentPayment.lease_id.in_(owner_leases))
            .order_by(RentPayment.id)
        )
        return list(result.scalars().all())
