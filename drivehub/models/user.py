from typing import Annotated
from beanie import Document, Indexed
from pydantic import Field

from drivehub.models.mixins import TimeMixin


class User(Document, TimeMixin):
    email: Annotated[str, Indexed(unique=True)] = Field(..., description="Lower-cased login email")
    password_hash: str = Field(..., description="bcrypt hash of the password")
    name: str = Field(..., min_length=1, max_length=50, description="Display name")

    class Settings:
        name = "users"
