from fastapi import APIRouter, Body, Depends, Request, status

from drivehub.models.user import User
from drivehub.schemas.response import ApiError, ApiResponse
from drivehub.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from drivehub.services.auth_service import AuthService
from drivehub.utils.api_response import created, ok
from drivehub.utils.logging import get_logger
from drivehub.utils.request import get_auth_service
from drivehub.utils.verify_token import verify_token

logger = get_logger(__name__)

router = APIRouter(
    tags=["Auth"],
    responses={
        400: {"model": ApiError, "description": "Bad Request"},
        401: {"model": ApiError, "description": "Unauthorized"},
    }
)


@router.post(
    "/register",
    response_model=ApiResponse[dict],
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ApiError, "description": "Email already registered"}},
)
async def register(
    body: RegisterRequest = Body(...),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await auth_service.register(body.email, body.password, body.name)
    return created({"user": UserResponse.from_document(user)}, message="User registered successfully")


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(
    request: Request,
    body: LoginRequest = Body(...),
    auth_service: AuthService = Depends(get_auth_service),
):
    user, token = await auth_service.login(body.email, body.password)
    settings = request.app.state.settings

    response = ok(
        data=LoginResponse(token=token, user=UserResponse.from_document(user)),
        message="Login successful",
    )
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.AUTH_JWT_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="strict",
        secure=settings.APP_ENV == "prod",
    )
    return response


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(request: Request):
    settings = request.app.state.settings
    response = ok(message="Logout successful")
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.APP_ENV == "prod",
    )
    return response


@router.get("/me", response_model=ApiResponse[dict])
async def me(current_user: User = Depends(verify_token)):
    return ok(data={"user": UserResponse.from_document(current_user)}, message="Get current user successfully")
