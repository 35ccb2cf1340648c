from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse
from starlette import status

from drivehub.api import auth_router, file_router, folder_router
from drivehub.configs.settings import Settings, settings as default_settings
from drivehub.core.exceptions import AppError
from drivehub.databases import mongodb
from drivehub.models import DOCUMENT_MODELS
from drivehub.schemas.response import ApiError, ApiResponse, ErrorDetail, HealthCheck
from drivehub.services import AuthService, HierarchyService, HierarchyStore, MinioBlobStore, UploadPolicy
from drivehub.utils import get_logger, setup_logging
from drivehub.utils.api_response import ok

logger = get_logger(__name__)

API_VERSION = "1.0.0"

ROUTERS = [
    (auth_router, "auth"),
    (file_router, "files"),
    (folder_router, "folders"),
]


async def _build_services(app: FastAPI, settings: Settings) -> None:
    """Blob store, upload policy and services are created once per process"""
    blob_store = MinioBlobStore.from_settings(settings)
    await blob_store.ensure_bucket()

    store = HierarchyStore(max_depth=settings.UPLOAD_MAX_FOLDER_DEPTH)
    app.state.auth_service = AuthService.from_settings(settings)
    app.state.hierarchy_service = HierarchyService(store, blob_store, UploadPolicy.from_settings(settings))
    logger.info(f"Services ready, blobs go to bucket {settings.MINIO_BUCKET}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(
        level="DEBUG" if settings.APP_DEBUG else "INFO",
        app_name=settings.APP_NAME,
        enable_json=settings.APP_ENV == "prod",
        log_file="logs/app.log" if settings.APP_ENV == "prod" else None,
    )
    logger.info(f"Starting {settings.APP_NAME} ({settings.APP_ENV})")

    try:
        await mongodb.connect(settings, document_models=DOCUMENT_MODELS)
        await mongodb.ensure_indexes()
        await _build_services(app, settings)
    except Exception:
        logger.error("Application startup failed", exc_info=True)
        await mongodb.disconnect()
        raise

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}")
        await mongodb.disconnect()


def _error_response(status_code: int, message: str, errors: Optional[List[dict]] = None) -> JSONResponse:
    body = ApiError(
        message=message,
        errors=[ErrorDetail(**e) for e in errors] if errors else None,
    ).model_dump(mode="json", exclude_none=True)
    return JSONResponse(content=body, status_code=status_code)


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    errors = list(exc.errors or [])
    if exc.field or not errors:
        errors.append({"code": exc.code, "message": exc.message, "field": exc.field})
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error_response(exc.status_code, exc.message, errors)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        # drop the body/query/path prefix, keep the field path
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        errors.append({
            "code": error.get("type", "validation_error"),
            "message": error.get("msg", ""),
            "field": field or None,
        })
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", errors)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)


def include_routers(app: FastAPI) -> None:
    for router, name in ROUTERS:
        app.include_router(router, prefix=f"/api/{name}")

    @app.get("/health", response_model=ApiResponse[HealthCheck], tags=["Health"])
    async def health():
        return ok(data=HealthCheck(status="ok", version=API_VERSION), message="Service is healthy")


def create_app(settings: Settings = default_settings) -> FastAPI:
    """App factory; services are attached by the lifespan, tests override the dependencies"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal drive API: folders, uploads, downloads",
        version=API_VERSION,
        debug=settings.APP_DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.APP_DEBUG else None,
        redoc_url="/redoc" if settings.APP_DEBUG else None,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )
    install_exception_handlers(app)
    include_routers(app)

    return app
