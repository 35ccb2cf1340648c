from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from beanie import Document

from drivehub.core.scope import Scope, parse_object_id
from drivehub.models.mixins import utc_now

ModelT = TypeVar("ModelT", bound=Document)


class BaseCRUD(Generic[ModelT]):
    """Owner-scoped reads and soft-delete writes shared by folders and files"""

    # name of the field that points at the containing folder
    parent_field: str = "parent_id"

    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def get_by_id(self, id: Any, include_deleted: bool = True) -> Optional[ModelT]:
        object_id = parse_object_id(id)
        if object_id is None:
            return None
        query: Dict[str, Any] = {"_id": object_id}
        if not include_deleted:
            query["is_deleted"] = False
        return await self.model.find_one(query)

    async def get_owned(self, owner_id: str, id: Any, include_deleted: bool = False) -> Optional[ModelT]:
        """Fetch by id, only if it belongs to ``owner_id``"""
        doc = await self.get_by_id(id, include_deleted=include_deleted)
        if doc is None or doc.owner_id != owner_id:
            return None
        return doc

    def scope_filter(self, scope: Scope) -> Dict[str, Any]:
        return {
            "owner_id": scope.owner_id,
            self.parent_field: scope.parent_id,
            "is_deleted": False,
        }

    async def list_in_scope(self, scope: Scope) -> List[ModelT]:
        return await self.model.find(self.scope_filter(scope)).to_list()

    async def count_in_scope(self, scope: Scope) -> int:
        return await self.model.find(self.scope_filter(scope)).count()

    async def create(self, data: Dict[str, Any]) -> ModelT:
        db_obj = self.model(**data)
        await db_obj.insert()
        return db_obj

    async def update(self, db_obj: ModelT, update_data: Dict[str, Any]) -> ModelT:
        update_data = dict(update_data)
        update_data["updated_at"] = utc_now()
        await db_obj.set(update_data)
        return db_obj

    async def soft_delete(self, db_obj: ModelT) -> None:
        now = utc_now()
        await db_obj.set({"is_deleted": True, "deleted_at": now, "updated_at": now})

    async def soft_delete_in_scope(self, scope: Scope) -> int:
        """Mark every live document directly in ``scope`` deleted, returns how many"""
        now = utc_now()
        result = await self.model.find(self.scope_filter(scope)).update_many(
            {"$set": {"is_deleted": True, "deleted_at": now, "updated_at": now}}
        )
        return getattr(result, "modified_count", 0) or 0
