from drivehub.schemas.response import ApiResponse, ApiError, ErrorDetail, HealthCheck
from drivehub.schemas.user import RegisterRequest, LoginRequest, UserResponse, LoginResponse
from drivehub.schemas.folder import FolderCreate, FolderRename, FolderMove, FolderResponse, Crumb
from drivehub.schemas.file import FileRename, FileMove, FileResponse

__all__ = [
    "ApiResponse",
    "ApiError",
    "ErrorDetail",
    "HealthCheck",
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "LoginResponse",
    "FolderCreate",
    "FolderRename",
    "FolderMove",
    "FolderResponse",
    "Crumb",
    "FileRename",
    "FileMove",
    "FileResponse",
]
