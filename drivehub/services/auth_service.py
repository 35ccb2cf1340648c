import asyncio
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
import jwt
from pymongo.errors import DuplicateKeyError

from drivehub.core.exceptions import AuthError, ConflictError, ValidationError
from drivehub.crud.user import UserCRUD
from drivehub.models.user import User
from drivehub.utils.logging import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
NAME_MAX_LENGTH = 50
# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72

INVALID_CREDENTIALS = "Invalid email or password"


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def validate_password(password: str) -> None:
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters", field="password")
    if len(password) > PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f"Password cannot exceed {PASSWORD_MAX_LENGTH} characters", field="password")
    if not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password) and re.search(r"\d", password)):
        raise ValidationError(
            "Password must contain at least one lowercase letter, one uppercase letter, and one number",
            field="password",
        )


class AuthService:
    """Registration, credential checks and bearer tokens"""

    def __init__(
        self,
        crud: Optional[UserCRUD] = None,
        *,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        jwt_expire_days: int = 7,
        bcrypt_rounds: int = 12,
    ):
        self.crud = crud or UserCRUD()
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.jwt_expire_days = jwt_expire_days
        self.bcrypt_rounds = bcrypt_rounds

    @classmethod
    def from_settings(cls, settings) -> "AuthService":
        return cls(
            jwt_secret=settings.AUTH_JWT_SECRET,
            jwt_algorithm=settings.AUTH_JWT_ALGORITHM,
            jwt_expire_days=settings.AUTH_JWT_EXPIRE_DAYS,
            bcrypt_rounds=settings.AUTH_BCRYPT_ROUNDS,
        )

    def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    @staticmethod
    def _check_password(password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    async def register(self, email: str, password: str, name: str) -> User:
        email = (email or "").strip().lower()
        name = (name or "").strip()

        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email", field="email")
        validate_password(password)
        if not name:
            raise ValidationError("Name is required", field="name")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(f"Name cannot exceed {NAME_MAX_LENGTH} characters", field="name")

        if await self.crud.get_by_email(email):
            raise ConflictError("User already exists with this email", field="email")

        password_hash = await asyncio.to_thread(self._hash_password, password)
        try:
            user = await self.crud.create({"email": email, "password_hash": password_hash, "name": name})
        except DuplicateKeyError:
            raise ConflictError("User already exists with this email", field="email")

        logger.info(f"Registered user {user.id}")
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.crud.get_by_email(email)
        if user is None:
            raise AuthError(INVALID_CREDENTIALS)

        matches = await asyncio.to_thread(self._check_password, password, user.password_hash)
        if not matches:
            logger.warning(f"Failed login for user {user.id}")
            raise AuthError(INVALID_CREDENTIALS)

        return user, self.issue_token(str(user.id))

    def issue_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + timedelta(days=self.jwt_expire_days),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def decode_token(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.jwt_secret, algorithms=[self.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token")

    async def resolve(self, token: str) -> User:
        """User behind a bearer token, or AuthError"""
        if not token:
            raise AuthError("Access denied. No token provided.")
        payload = self.decode_token(token)
        user = await self.crud.get_by_id(payload.get("sub"))
        if user is None:
            raise AuthError("Invalid token")
        return user
