from typing import Literal, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Path, Query, UploadFile, status
from fastapi.responses import RedirectResponse

from drivehub.models.user import User
from drivehub.schemas.file import FileMove, FileRename, FileResponse
from drivehub.schemas.response import ApiError, ApiResponse
from drivehub.services.hierarchy_service import HierarchyService
from drivehub.utils.api_response import created, ok
from drivehub.utils.logging import get_logger
from drivehub.utils.request import get_hierarchy_service
from drivehub.utils.verify_token import verify_token

logger = get_logger(__name__)

router = APIRouter(
    tags=["Files"],
    responses={
        400: {"model": ApiError, "description": "Bad Request"},
        401: {"model": ApiError, "description": "Unauthorized"},
        404: {"model": ApiError, "description": "Not Found"},
        422: {"model": ApiError, "description": "Validation Error"},
        500: {"model": ApiError, "description": "Internal Server Error"}
    }
)

SortBy = Literal["name", "modifiedTime", "date", "size"]


def sort_params(
    sort_by: SortBy = Query("name", alias="sortBy"),
    order: Literal["asc", "desc"] = Query("asc"),
):
    """``date`` is the older spelling of ``modifiedTime``"""
    return ("modifiedTime" if sort_by == "date" else sort_by), order


@router.get(
    "",
    response_model=ApiResponse[dict],
    summary="List Files",
    description="Live files directly inside a folder, or at the root when folderId is omitted",
)
async def list_files(
    folder_id: Optional[str] = Query(None, alias="folderId"),
    sort=Depends(sort_params),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    owner_id = str(current_user.id)
    scope = await service.resolve_scope(owner_id, folder_id)
    files = await service.list_files(scope, *sort)
    return ok(data={"files": [FileResponse.from_document(f) for f in files]}, message="Files retrieved successfully")


@router.post(
    "",
    response_model=ApiResponse[dict],
    status_code=status.HTTP_201_CREATED,
    summary="Upload File",
    responses={
        409: {"model": ApiError, "description": "Name already used in this folder"},
        413: {"model": ApiError, "description": "File too large"},
    }
)
async def upload_file(
    file: UploadFile = File(...),
    folder_id: Optional[str] = Form(None, alias="folderId"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    uploaded = await service.upload(
        owner_id=str(current_user.id),
        folder_id=folder_id,
        content=file,
        display_name=file.filename or "",
        declared_size=file.size,
        declared_type=file.content_type,
    )
    return created({"file": FileResponse.from_document(uploaded)}, message="File uploaded successfully")


@router.get("/{file_id}", response_model=ApiResponse[dict], summary="Get File")
async def get_file(
    file_id: str = Path(..., description="File ID"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    file = await service.get_file(str(current_user.id), file_id)
    return ok(data={"file": FileResponse.from_document(file)})


@router.put("/{file_id}", response_model=ApiResponse[dict], summary="Rename File")
async def rename_file(
    file_id: str = Path(..., description="File ID"),
    body: FileRename = Body(...),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    file = await service.rename_file(str(current_user.id), file_id, body.original_name)
    return ok(data={"file": FileResponse.from_document(file)}, message="File renamed successfully")


@router.put("/{file_id}/move", response_model=ApiResponse[dict], summary="Move File")
async def move_file(
    file_id: str = Path(..., description="File ID"),
    body: FileMove = Body(...),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    file = await service.move_file(str(current_user.id), file_id, body.folder_id)
    return ok(data={"file": FileResponse.from_document(file)}, message="File moved successfully")


@router.delete("/{file_id}", response_model=ApiResponse[dict], summary="Delete File")
async def delete_file(
    file_id: str = Path(..., description="File ID to delete"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    await service.delete_file(str(current_user.id), file_id)
    return ok(message="File deleted successfully")


@router.get(
    "/{file_id}/download",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Download File",
    description="Redirects to a short-lived URL that serves the file as an attachment",
)
async def download_file(
    file_id: str = Path(..., description="File ID"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    location = await service.download(str(current_user.id), file_id)
    return RedirectResponse(location.url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get(
    "/{file_id}/preview",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Preview File",
    description="Redirects to a short-lived URL that serves the file inline",
)
async def preview_file(
    file_id: str = Path(..., description="File ID"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    location = await service.preview(str(current_user.id), file_id)
    return RedirectResponse(location.url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
