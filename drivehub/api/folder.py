from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from drivehub.api.file import sort_params
from drivehub.models.user import User
from drivehub.schemas.folder import FolderCreate, FolderMove, FolderRename, FolderResponse
from drivehub.schemas.response import ApiError, ApiResponse
from drivehub.services.hierarchy_service import HierarchyService
from drivehub.services.hierarchy_store import FolderEntry
from drivehub.utils.api_response import created, ok
from drivehub.utils.request import get_hierarchy_service
from drivehub.utils.verify_token import verify_token

router = APIRouter(
    tags=["Folders"],
    responses={
        400: {"model": ApiError, "description": "Bad Request"},
        401: {"model": ApiError, "description": "Unauthorized"},
        404: {"model": ApiError, "description": "Not Found"},
        422: {"model": ApiError, "description": "Validation Error"},
    }
)


def _to_response(entry: FolderEntry) -> FolderResponse:
    return FolderResponse.from_document(entry.folder, entry.children_count, entry.files_count)


@router.get("", response_model=ApiResponse[dict], summary="List Folders")
async def list_folders(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    sort=Depends(sort_params),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    scope = await service.resolve_scope(str(current_user.id), parent_id)
    entries = await service.list_folders(scope, *sort)
    return ok(data={"folders": [_to_response(e) for e in entries]}, message="Folders retrieved successfully")


@router.post(
    "",
    response_model=ApiResponse[dict],
    status_code=status.HTTP_201_CREATED,
    summary="Create Folder",
    responses={409: {"model": ApiError, "description": "Name already used in this folder"}},
)
async def create_folder(
    body: FolderCreate = Body(...),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    folder = await service.create_folder(str(current_user.id), body.parent_id, body.name)
    return created({"folder": FolderResponse.from_document(folder)}, message="Folder created successfully")


@router.get("/{folder_id}", response_model=ApiResponse[dict], summary="Get Folder")
async def get_folder(
    folder_id: str = Path(..., description="Folder ID"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    entry = await service.get_folder(str(current_user.id), folder_id)
    return ok(data={"folder": _to_response(entry)})


@router.get("/{folder_id}/path", response_model=ApiResponse[dict], summary="Folder Breadcrumbs")
async def get_folder_path(
    folder_id: str = Path(..., description="Folder ID"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    trail = await service.breadcrumbs(str(current_user.id), folder_id)
    return ok(data={"path": trail})


@router.put("/{folder_id}", response_model=ApiResponse[dict], summary="Rename Folder")
async def rename_folder(
    folder_id: str = Path(..., description="Folder ID"),
    body: FolderRename = Body(...),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    folder = await service.rename_folder(str(current_user.id), folder_id, body.name)
    return ok(data={"folder": FolderResponse.from_document(folder)}, message="Folder renamed successfully")


@router.put("/{folder_id}/move", response_model=ApiResponse[dict], summary="Move Folder")
async def move_folder(
    folder_id: str = Path(..., description="Folder ID"),
    body: FolderMove = Body(...),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    folder = await service.move_folder(str(current_user.id), folder_id, body.parent_id)
    return ok(data={"folder": FolderResponse.from_document(folder)}, message="Folder moved successfully")


@router.delete("/{folder_id}", response_model=ApiResponse[dict], summary="Delete Folder")
async def delete_folder(
    folder_id: str = Path(..., description="Folder ID"),
    current_user: User = Depends(verify_token),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    await service.delete_folder(str(current_user.id), folder_id)
    return ok(message="Folder and all its contents deleted successfully")
