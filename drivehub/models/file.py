from typing import Literal, Optional, Annotated
from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field
from drivehub.models.mixins import TimeMixin
from drivehub.models.mixins import SoftDeleteMixin

StorageType = Literal["local", "cloud"]


class File(Document, TimeMixin, SoftDeleteMixin):
    """File metadata in MongoDB, the bytes live in the blob store"""

    owner_id: Annotated[str, Indexed()] = Field(..., description="User who owns the file")
    name: str = Field(..., description="Stored name, unique per upload")
    original_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    size: int = Field(..., ge=0, description="File size (bytes)")
    type: str = Field(..., description="Coarse type category: image, video, document, ...")
    mime_type: str = Field(..., description="Content type: text/csv, image/jpeg, etc.")
    folder_id: Optional[PydanticObjectId] = Field(default=None, description="Containing folder, None for root")

    storage_type: StorageType = Field(default="cloud", description="Where the bytes are stored")
    path: str = Field(..., description="Local path or object key")
    cloud_url: Optional[str] = Field(default=None, description="Durable URL in the blob store")
    cloud_object_id: Optional[str] = Field(default=None, description="Object id in the blob store")

    @property
    def url(self) -> str:
        return f"/api/files/{self.id}/download"

    class Settings:
        name = "files"
