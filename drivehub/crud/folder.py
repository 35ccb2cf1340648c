from datetime import datetime
from typing import List, Optional

from beanie import PydanticObjectId

from drivehub.core.scope import Scope
from drivehub.crud.base import BaseCRUD
from drivehub.models.folder import Folder


class FolderCRUD(BaseCRUD[Folder]):
    parent_field = "parent_id"

    def __init__(self):
        super().__init__(Folder)

    async def find_by_name_key(
        self, scope: Scope, name_key: str, exclude_id: Optional[PydanticObjectId] = None
    ) -> Optional[Folder]:
        """Live sibling with the same case-folded name"""
        query = self.scope_filter(scope)
        query["name_key"] = name_key
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return await self.model.find_one(query)

    async def list_child_folders(
        self, owner_id: str, folder_id: PydanticObjectId, deleted_since: datetime
    ) -> List[Folder]:
        """Direct children that are live or were deleted at ``deleted_since`` or later"""
        return await self.model.find({
            "owner_id": owner_id,
            "parent_id": folder_id,
            "$or": [{"is_deleted": False}, {"deleted_at": {"$gte": deleted_since}}],
        }).sort("+created_at").to_list()
