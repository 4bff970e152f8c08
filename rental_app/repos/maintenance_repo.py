from typing import List

from models.models import MaintenanceRequest

from repos.base_repo import BaseRepo


class MaintenanceRequestRepo(BaseRepo[MaintenanceRequest]):
    model = MaintenanceRequest

    async def for_property(self, property_id: int) -> List[MaintenanceRequest]:
        return await self.filter_by(MaintenanceRequest.property_id, property_id)

    async def for_tenant(self, tenant_id: int) -> List[MaintenanceRequest]:
        return await self.filter_by(MaintenanceRequest.tenant_id, tenant_id)
