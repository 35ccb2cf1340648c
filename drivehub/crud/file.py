from typing import Optional

from beanie import PydanticObjectId

from drivehub.core.scope import Scope
from drivehub.crud.base import BaseCRUD
from drivehub.models.file import File


class FileCRUD(BaseCRUD[File]):
    parent_field = "folder_id"

    def __init__(self):
        super().__init__(File)

    async def find_by_original_name(
        self, scope: Scope, original_name: str, exclude_id: Optional[PydanticObjectId] = None
    ) -> Optional[File]:
        """Live file in the scope with exactly this display name"""
        query = self.scope_filter(scope)
        query["original_name"] = original_name
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return await self.model.find_one(query)
