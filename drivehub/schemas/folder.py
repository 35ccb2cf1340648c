from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from drivehub.models.folder import Folder


class FolderCreate(BaseModel):
    name: str = Field(..., description="Folder name")
    parent_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("parentId", "parent_id"),
        description="Parent folder id, null or 'root' for the top level",
    )


class FolderRename(BaseModel):
    name: str


class FolderMove(BaseModel):
    parent_id: Optional[str] = Field(None, validation_alias=AliasChoices("parentId", "parent_id"))


class FolderResponse(BaseModel):
    """Folder as returned by the API, with live child counts"""
    id: str
    name: str
    owner_id: str
    parent_id: Optional[str] = None
    children_count: int = 0
    files_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, folder: Folder, children_count: int = 0, files_count: int = 0) -> "FolderResponse":
        return cls(
            id=str(folder.id),
            name=folder.name,
            owner_id=folder.owner_id,
            parent_id=str(folder.parent_id) if folder.parent_id else None,
            children_count=children_count,
            files_count=files_count,
            created_at=folder.created_at,
            updated_at=folder.updated_at,
        )


class Crumb(BaseModel):
    """One breadcrumb step; id is None for the root"""
    id: Optional[str] = None
    name: str
