from typing import List

from models.models import Property

from repos.base_repo import BaseRepo


class PropertyRepo(BaseRepo[Property]):
    model = Property

    async def for_owner(self, owner_id: int) -> List[Property]:
        return await self.filter_by(Property.owner_id, owner_id)
