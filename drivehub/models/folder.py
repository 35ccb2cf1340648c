from typing import Optional, Annotated
from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field
from drivehub.models.mixins import TimeMixin
from drivehub.models.mixins import SoftDeleteMixin


class Folder(Document, TimeMixin, SoftDeleteMixin):
    """A node in a user's folder tree"""

    owner_id: Annotated[str, Indexed()] = Field(..., description="User who owns the folder")
    name: str = Field(..., min_length=1, max_length=100, description="Folder name")
    name_key: str = Field(..., description="Case-folded name used for sibling uniqueness")
    parent_id: Optional[PydanticObjectId] = Field(default=None, description="Parent folder, None for root")

    class Settings:
        name = "folders"
