from typing import List

from models.enums import LeaseStatus
from models.models import Lease

from repos.base_repo import BaseRepo


class LeaseRepo(BaseRepo[Lease]):
    model = Lease

    async def for_property(self, property_id: int) -> List[Lease]:
        return await self.filter_by(Lease.property_id, property_id)

    async def for_tenant(self, tenant_id: int) -> List[Lease]:
        return await self.filter_by(Lease.tenant_id, tenant_id)

    async def count_active(self) -> int:
        return await self.count(Lease.status == LeaseStatus.ACTIVE)
