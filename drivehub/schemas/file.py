from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from drivehub.models.file import File


class FileRename(BaseModel):
    original_name: str = Field(
        ...,
        validation_alias=AliasChoices("originalName", "original_name"),
        description="New display name",
    )


class FileMove(BaseModel):
    folder_id: Optional[str] = Field(None, validation_alias=AliasChoices("folderId", "folder_id"))


class FileResponse(BaseModel):
    """Schema for returning file information"""
    id: str = Field(..., description="Unique file identifier")
    name: str = Field(..., description="Stored name")
    original_name: str = Field(..., description="Display name")
    size: int = Field(..., description="File size in bytes")
    type: str = Field(..., description="Coarse type category")
    mime_type: str = Field(..., description="File MIME type")
    folder_id: Optional[str] = Field(None, description="Containing folder, null for root")
    owner_id: str = Field(..., description="User who owns the file")
    storage_type: str = Field(..., description="local or cloud")
    url: str = Field(..., description="Download endpoint")
    created_at: datetime = Field(..., description="File creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_document(cls, file: File) -> "FileResponse":
        return cls(
            id=str(file.id),
            name=file.name,
            original_name=file.original_name,
            size=file.size,
            type=file.type,
            mime_type=file.mime_type,
            folder_id=str(file.folder_id) if file.folder_id else None,
            owner_id=file.owner_id,
            storage_type=file.storage_type,
            url=file.url,
            created_at=file.created_at,
            updated_at=file.updated_at,
        )
