from typing import Optional

from drivehub.crud.base import BaseCRUD
from drivehub.models.user import User


class UserCRUD(BaseCRUD[User]):
    def __init__(self):
        super().__init__(User)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.model.find_one({"email": email.strip().lower()})
