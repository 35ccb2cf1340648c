from datetime import datetime
from pydantic import BaseModel, Field

from drivehub.models.user import User


class RegisterRequest(BaseModel):
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="6-128 chars with a lower-case letter, an upper-case letter and a digit")
    name: str = Field(..., description="Display name")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    created_at: datetime

    @classmethod
    def from_document(cls, user: User) -> "UserResponse":
        return cls(id=str(user.id), email=user.email, name=user.name, created_at=user.created_at)


class LoginResponse(BaseModel):
    token: str
    user: UserResponse
