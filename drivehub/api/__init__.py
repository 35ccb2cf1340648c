from drivehub.api.auth import router as auth_router
from drivehub.api.file import router as file_router
from drivehub.api.folder import router as folder_router

__all__ = [
    "auth_router",
    "file_router",
    "folder_router",
]
