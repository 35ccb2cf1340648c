"""Folder and file metadata for every user's drive.

Everything here works on live entities only: a soft-deleted folder or file
is reported exactly like a missing one. Name uniqueness is checked in the
sibling scope before each write and is backed by partial unique indexes, so
a lost race still ends in ``DuplicateNameError``.
"""
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Set, Tuple, Union

from beanie import PydanticObjectId
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from drivehub.core.exceptions import (
    DuplicateNameError,
    HierarchyIntegrityError,
    NotFoundError,
    ParentNotFoundError,
    ValidationError,
)
from drivehub.core.scope import FolderScope, RootScope, Scope, is_root, parse_object_id, scope_of
from drivehub.crud.file import FileCRUD
from drivehub.crud.folder import FolderCRUD
from drivehub.models.file import File
from drivehub.models.folder import Folder
from drivehub.schemas.folder import Crumb
from drivehub.utils.logging import get_logger
from drivehub.utils.naming import folder_name_key, natural_sort_key, validate_file_name, validate_folder_name

logger = get_logger(__name__)

SortKey = Literal["name", "modifiedTime", "size"]
SortOrder = Literal["asc", "desc"]
RawId = Union[str, ObjectId, None]

ROOT_CRUMB_NAME = "My Drive"
DEFAULT_MAX_DEPTH = 256

FOLDER_NOT_FOUND = "Folder not found"
FILE_NOT_FOUND = "File not found"
FOLDER_EXISTS = "A folder with this name already exists in this location"
FILE_EXISTS = "A file with this name already exists in this location"


@dataclass
class FolderEntry:
    folder: Folder
    children_count: int = 0
    files_count: int = 0


@contextmanager
def _unique_name(message: str, field: str):
    """Turn a unique index violation into the same error the pre-check raises"""
    try:
        yield
    except DuplicateKeyError:
        raise DuplicateNameError(message, field=field)


def _sorted(items: list, sort_key: SortKey, order: SortOrder, name_of, size_of) -> list:
    if sort_key == "size":
        key = lambda item: (size_of(item), natural_sort_key(name_of(item)))
    elif sort_key == "modifiedTime":
        key = lambda item: (item.updated_at, natural_sort_key(name_of(item)))
    else:
        key = lambda item: natural_sort_key(name_of(item))
    return sorted(items, key=key, reverse=(order == "desc"))


class HierarchyStore:
    def __init__(
        self,
        folders: Optional[FolderCRUD] = None,
        files: Optional[FileCRUD] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.folders = folders or FolderCRUD()
        self.files = files or FileCRUD()
        self.max_depth = max_depth

    async def get_folder(self, owner_id: str, folder_id: RawId) -> Folder:
        folder = await self.folders.get_owned(owner_id, folder_id)
        if folder is None:
            raise NotFoundError(FOLDER_NOT_FOUND)
        return folder

    async def get_file(self, owner_id: str, file_id: RawId) -> File:
        file = await self.files.get_owned(owner_id, file_id)
        if file is None:
            raise NotFoundError(FILE_NOT_FOUND)
        return file

    async def resolve_scope(self, owner_id: str, parent_id: RawId) -> Scope:
        """Scope under ``parent_id``; the parent must be a live folder of ``owner_id``"""
        if is_root(parent_id):
            return RootScope(owner_id)
        object_id = parse_object_id(parent_id)
        parent = await self.folders.get_owned(owner_id, object_id) if object_id else None
        if parent is None:
            raise ParentNotFoundError()
        return FolderScope(owner_id, parent.id)

    async def describe_folder(self, folder: Folder) -> FolderEntry:
        inside = FolderScope(folder.owner_id, folder.id)
        return FolderEntry(
            folder=folder,
            children_count=await self.folders.count_in_scope(inside),
            files_count=await self.files.count_in_scope(inside),
        )

    async def list_folders(
        self, scope: Scope, sort_key: SortKey = "name", order: SortOrder = "asc"
    ) -> List[FolderEntry]:
        folders = await self.folders.list_in_scope(scope)
        folders = _sorted(folders, sort_key, order, name_of=lambda f: f.name, size_of=lambda f: 0)
        return [await self.describe_folder(folder) for folder in folders]

    async def list_files(
        self, scope: Scope, sort_key: SortKey = "name", order: SortOrder = "asc"
    ) -> List[File]:
        files = await self.files.list_in_scope(scope)
        return _sorted(files, sort_key, order, name_of=lambda f: f.original_name, size_of=lambda f: f.size)

    async def list_children(
        self, scope: Scope, sort_key: SortKey = "name", order: SortOrder = "asc"
    ) -> Tuple[List[FolderEntry], List[File]]:
        return (
            await self.list_folders(scope, sort_key, order),
            await self.list_files(scope, sort_key, order),
        )

    async def breadcrumbs(self, owner_id: str, folder_id: RawId) -> List[Crumb]:
        """Path from the drive root down to ``folder_id``, both ends included"""
        folder = await self.get_folder(owner_id, folder_id)
        trail: List[Crumb] = []
        visited: Set[ObjectId] = set()
        current: Optional[Folder] = folder

        while current is not None:
            if current.id in visited:
                logger.error(f"Cycle above folder {folder.id} at {current.id}")
                raise HierarchyIntegrityError("Folder hierarchy contains a cycle")
            if len(visited) >= self.max_depth:
                raise HierarchyIntegrityError(f"Folder hierarchy deeper than {self.max_depth} levels")
            visited.add(current.id)
            trail.append(Crumb(id=str(current.id), name=current.name))
            if current.parent_id is None:
                break
            current = await self.folders.get_owned(owner_id, current.parent_id)

        trail.append(Crumb(id=None, name=ROOT_CRUMB_NAME))
        trail.reverse()
        return trail

    async def create_folder(self, owner_id: str, parent_id: RawId, name: str) -> Folder:
        name = validate_folder_name(name)
        scope = await self.resolve_scope(owner_id, parent_id)
        name_key = folder_name_key(name)

        if isinstance(scope, FolderScope):
            parent_depth = len(await self._ancestor_ids(owner_id, scope.folder_id))
            self._check_depth(parent_depth + 1, field="parentId")

        if await self.folders.find_by_name_key(scope, name_key):
            raise DuplicateNameError(FOLDER_EXISTS, field="name")

        with _unique_name(FOLDER_EXISTS, "name"):
            folder = await self.folders.create({
                "owner_id": owner_id,
                "name": name,
                "name_key": name_key,
                "parent_id": scope.parent_id,
            })

        logger.info(f"Created folder {folder.id} for user {owner_id}")
        return folder

    async def rename_folder(self, owner_id: str, folder_id: RawId, new_name: str) -> Folder:
        folder = await self.get_folder(owner_id, folder_id)
        name = validate_folder_name(new_name)
        name_key = folder_name_key(name)
        scope = scope_of(owner_id, folder.parent_id)

        if await self.folders.find_by_name_key(scope, name_key, exclude_id=folder.id):
            raise DuplicateNameError(FOLDER_EXISTS, field="name")

        with _unique_name(FOLDER_EXISTS, "name"):
            await self.folders.update(folder, {"name": name, "name_key": name_key})

        logger.info(f"Renamed folder {folder.id}")
        return folder

    async def _ancestor_ids(self, owner_id: str, start: ObjectId) -> Set[ObjectId]:
        """Ids on the parent chain from ``start`` (included) up to the root"""
        seen: Set[ObjectId] = set()
        current: Optional[ObjectId] = start
        while current is not None:
            if current in seen:
                raise HierarchyIntegrityError("Folder hierarchy contains a cycle")
            if len(seen) >= self.max_depth:
                raise HierarchyIntegrityError(f"Folder hierarchy deeper than {self.max_depth} levels")
            seen.add(current)
            node = await self.folders.get_owned(owner_id, current, include_deleted=True)
            current = node.parent_id if node else None
        return seen

    async def _subtree_height(self, folder: Folder, limit: int) -> int:
        """Levels of live folders from ``folder`` down, counting ``folder``.

        Stops once the count passes ``limit``.
        """
        height = 0
        seen: Set[ObjectId] = set()
        level: List[Folder] = [folder]
        while level and height <= limit:
            height += 1
            below: List[Folder] = []
            for node in level:
                if node.id in seen:
                    raise HierarchyIntegrityError("Folder hierarchy contains a cycle")
                seen.add(node.id)
                below.extend(await self.folders.list_in_scope(FolderScope(node.owner_id, node.id)))
            level = below
        return height

    def _check_depth(self, depth: int, field: str) -> None:
        if depth > self.max_depth:
            raise ValidationError(f"Folders cannot be nested more than {self.max_depth} levels deep", field=field)

    async def move_folder(self, owner_id: str, folder_id: RawId, new_parent_id: RawId) -> Folder:
        folder = await self.get_folder(owner_id, folder_id)
        scope = await self.resolve_scope(owner_id, new_parent_id)

        if scope.parent_id == folder.parent_id:
            return folder

        parent_depth = 0
        if isinstance(scope, FolderScope):
            ancestors = await self._ancestor_ids(owner_id, scope.folder_id)
            if folder.id in ancestors:
                raise ValidationError(
                    "Cannot move a folder into itself or one of its subfolders", field="parentId")
            parent_depth = len(ancestors)

        room = self.max_depth - parent_depth
        self._check_depth(parent_depth + await self._subtree_height(folder, room), field="parentId")

        if await self.folders.find_by_name_key(scope, folder.name_key, exclude_id=folder.id):
            raise DuplicateNameError(FOLDER_EXISTS, field="name")

        with _unique_name(FOLDER_EXISTS, "name"):
            await self.folders.update(folder, {"parent_id": scope.parent_id})

        logger.info(f"Moved folder {folder.id} under {scope.parent_id or 'root'}")
        return folder

    async def delete_folder(self, owner_id: str, folder_id: RawId) -> None:
        """Soft-delete the folder and everything below it"""
        folder = await self.get_folder(owner_id, folder_id)
        folders_deleted, files_deleted = await self._cascade_delete(folder)
        logger.info(
            f"Deleted folder {folder.id}: {folders_deleted} folders and {files_deleted} files marked deleted")

    async def _cascade_delete(self, root: Folder) -> Tuple[int, int]:
        """Mark ``root`` and its whole subtree deleted.

        Runs from deleted folders too. Children already marked at or after
        ``root`` belong to the same cascade and are walked again, so a run
        that stopped halfway is completed by running it again. Folders
        deleted before ``root`` were cascaded on their own and are skipped.
        """
        folders_deleted = 0
        if not root.is_deleted or root.deleted_at is None:
            await self.folders.soft_delete(root)
            folders_deleted += 1
        # stored datetimes keep milliseconds only
        cascade_started = root.deleted_at.replace(microsecond=root.deleted_at.microsecond // 1000 * 1000)

        files_deleted = 0
        visited: Set[PydanticObjectId] = set()
        pending: List[Folder] = [root]

        while pending:
            folder = pending.pop()
            if folder.id in visited:
                logger.error(f"Cycle below folder {root.id} at {folder.id}, cascade stopped")
                raise HierarchyIntegrityError("Folder hierarchy contains a cycle")
            visited.add(folder.id)

            if not folder.is_deleted:
                await self.folders.soft_delete(folder)
                folders_deleted += 1
            files_deleted += await self.files.soft_delete_in_scope(FolderScope(folder.owner_id, folder.id))
            pending.extend(await self.folders.list_child_folders(folder.owner_id, folder.id, cascade_started))

        return folders_deleted, files_deleted

    async def check_file_slot(self, owner_id: str, folder_id: RawId, original_name: str) -> Scope:
        """Scope a new file named ``original_name`` would land in, if it is free"""
        scope = await self.resolve_scope(owner_id, folder_id)
        if await self.files.find_by_original_name(scope, original_name):
            raise DuplicateNameError(FILE_EXISTS, field="originalName")
        return scope

    async def create_file(self, owner_id: str, folder_id: RawId, meta: Dict[str, Any]) -> File:
        """Insert file metadata; ``meta`` carries everything but owner and folder"""
        original_name = validate_file_name(meta.get("original_name", ""))
        scope = await self.check_file_slot(owner_id, folder_id, original_name)

        with _unique_name(FILE_EXISTS, "originalName"):
            file = await self.files.create({
                **meta,
                "original_name": original_name,
                "owner_id": owner_id,
                "folder_id": scope.parent_id,
            })

        logger.info(f"Created file {file.id} for user {owner_id}")
        return file

    async def rename_file(self, owner_id: str, file_id: RawId, new_original_name: str) -> File:
        file = await self.get_file(owner_id, file_id)
        original_name = validate_file_name(new_original_name)
        scope = scope_of(owner_id, file.folder_id)

        if await self.files.find_by_original_name(scope, original_name, exclude_id=file.id):
            raise DuplicateNameError(FILE_EXISTS, field="originalName")

        with _unique_name(FILE_EXISTS, "originalName"):
            await self.files.update(file, {"original_name": original_name})

        logger.info(f"Renamed file {file.id}")
        return file

    async def move_file(self, owner_id: str, file_id: RawId, new_folder_id: RawId) -> File:
        file = await self.get_file(owner_id, file_id)
        scope = await self.resolve_scope(owner_id, new_folder_id)

        if scope.parent_id == file.folder_id:
            return file

        if await self.files.find_by_original_name(scope, file.original_name, exclude_id=file.id):
            raise DuplicateNameError(FILE_EXISTS, field="originalName")

        with _unique_name(FILE_EXISTS, "originalName"):
            await self.files.update(file, {"folder_id": scope.parent_id})

        logger.info(f"Moved file {file.id} to {scope.parent_id or 'root'}")
        return file

    async def delete_file(self, owner_id: str, file_id: RawId) -> None:
        """Soft delete only, the blob stays in the store"""
        file = await self.get_file(owner_id, file_id)
        await self.files.soft_delete(file)
        logger.info(f"Deleted file {file.id}")
