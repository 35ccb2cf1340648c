from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from drivehub.models.user import User
from drivehub.services.auth_service import AuthService
from drivehub.utils.request import get_auth_service

security = HTTPBearer(auto_error=False)


async def verify_token(
    request: Request,
    authorization_credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Resolve the caller from a bearer token, falling back to the session cookie"""
    token = authorization_credentials.credentials if authorization_credentials else None
    if not token:
        token = request.cookies.get(request.app.state.settings.AUTH_COOKIE_NAME)
    return await auth_service.resolve(token)
