from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    # Mongo hands back naive UTC datetimes, keep in-memory values comparable
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimeMixin(BaseModel):
    created_at: datetime = Field(
        default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(
        default_factory=utc_now, description="Refreshed on rename, move and delete")


class SoftDeleteMixin(BaseModel):
    """Deleted rows stay in the collection but every drive lookup skips them"""
    is_deleted: bool = Field(
        default=False, description="True once the entity or an ancestor folder was deleted")
    deleted_at: Optional[datetime] = Field(
        default=None, description="When it was marked deleted")
