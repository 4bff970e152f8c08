from typing import List

from models.models import LeaseApplication

from repos.base_repo import BaseRepo


class LeaseApplicationRepo(BaseRepo[LeaseApplication]):
    model = LeaseApplication

    async def for_property(self, property_id: int) -> List[LeaseApplication]:
        return await self.filter_by(LeaseApplication.property_id, property_id)

    async def for_applicant(self, applicant_id: int) -> List[LeaseApplication]:
        return await self.filter_by(LeaseApplication.applicant_id, applicant_id)
