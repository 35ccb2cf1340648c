from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple, Union

from starlette.datastructures import UploadFile
from starlette.status import HTTP_400_BAD_REQUEST

from drivehub.core.exceptions import FileTooLargeError, StorageError, ValidationError
from drivehub.core.scope import Scope
from drivehub.models.file import File
from drivehub.models.folder import Folder
from drivehub.schemas.folder import Crumb
from drivehub.services.blob_store import BlobStore, Disposition
from drivehub.services.hierarchy_store import FolderEntry, HierarchyStore, RawId, SortKey, SortOrder
from drivehub.utils.file_classifier import FileClassifier
from drivehub.utils.logging import get_logger
from drivehub.utils.naming import generate_stored_name, validate_file_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadPolicy:
    max_file_size: int
    allowed_types: Tuple[str, ...] = field(default_factory=tuple)
    # prepended to every object key, e.g. "uploads/"
    key_prefix: str = ""

    @classmethod
    def from_settings(cls, settings) -> "UploadPolicy":
        return cls(
            max_file_size=settings.UPLOAD_MAX_FILE_SIZE,
            allowed_types=tuple(settings.UPLOAD_ALLOWED_TYPES),
        )

    def object_key(self, owner_id: str, stored_name: str) -> str:
        return f"{self.key_prefix}{owner_id}/{stored_name}"


@dataclass(frozen=True)
class ContentLocation:
    """Where the client should fetch a file's bytes from"""
    url: str
    filename: str
    mime_type: str
    size: int
    disposition: Literal["attachment", "inline"]


def _size_label(size: int) -> str:
    return f"{size / (1024 * 1024):g}MB"


class HierarchyService:
    """Drive use cases on top of the metadata store and the blob store"""

    def __init__(self, store: HierarchyStore, blob_store: BlobStore, policy: UploadPolicy):
        self.store = store
        self.blob_store = blob_store
        self.policy = policy

    def _check_size(self, size: int) -> None:
        if size > self.policy.max_file_size:
            raise FileTooLargeError(
                f"File size exceeds the maximum limit of {_size_label(self.policy.max_file_size)}")

    async def upload(
        self,
        owner_id: str,
        folder_id: RawId,
        content: Union[bytes, UploadFile],
        display_name: str,
        declared_size: Optional[int],
        declared_type: Optional[str],
    ) -> File:
        """Store the bytes, then record the file.

        ``content`` may be an unread ``UploadFile``; it is only read once the
        name, declared size, type and target slot have passed. All checks run
        before anything is sent to the blob store. If the metadata insert
        fails afterwards the blob is left behind and logged.
        """
        original_name = validate_file_name(display_name)
        mime_type = declared_type or "application/octet-stream"

        if declared_size is not None:
            self._check_size(declared_size)
        if self.policy.allowed_types and mime_type not in self.policy.allowed_types:
            raise ValidationError(f"File type {mime_type} is not allowed", field="file")

        await self.store.check_file_slot(owner_id, folder_id, original_name)

        if not isinstance(content, bytes):
            content = await content.read()
        self._check_size(len(content))

        stored_name = generate_stored_name(original_name)
        key = self.policy.object_key(owner_id, stored_name)
        logger.info(f"[UPLOAD] Storing blob {key} ({len(content)} bytes) for user {owner_id}")
        blob = await self.blob_store.upload(key, content, mime_type)

        try:
            file = await self.store.create_file(owner_id, folder_id, {
                "name": stored_name,
                "original_name": original_name,
                "size": len(content),
                "type": FileClassifier.get_file_category(mime_type, original_name),
                "mime_type": mime_type,
                "storage_type": "cloud",
                "path": key,
                "cloud_url": blob.url,
                "cloud_object_id": blob.object_id,
            })
        except Exception:
            logger.warning(f"[UPLOAD] Metadata insert failed, blob {blob.object_id} left orphaned")
            raise

        logger.info(f"[UPLOAD] Completed - file_id: {file.id}, name: {original_name}")
        return file

    async def _locate(self, owner_id: str, file_id: RawId, disposition: Disposition) -> ContentLocation:
        file = await self.store.get_file(owner_id, file_id)
        if file.storage_type != "cloud" or not file.cloud_object_id:
            raise StorageError(
                f"Unsupported storage type: {file.storage_type}", status_code=HTTP_400_BAD_REQUEST)

        url = await self.blob_store.get_url(file.cloud_object_id, file.original_name, disposition)
        return ContentLocation(
            url=url,
            filename=file.original_name,
            mime_type=file.mime_type,
            size=file.size,
            disposition=disposition,
        )

    async def download(self, owner_id: str, file_id: RawId) -> ContentLocation:
        return await self._locate(owner_id, file_id, "attachment")

    async def preview(self, owner_id: str, file_id: RawId) -> ContentLocation:
        return await self._locate(owner_id, file_id, "inline")

    async def list_children(
        self, scope: Scope, sort_key: SortKey = "name", order: SortOrder = "asc"
    ) -> Tuple[List[FolderEntry], List[File]]:
        return await self.store.list_children(scope, sort_key, order)

    async def list_folders(self, scope: Scope, sort_key: SortKey = "name", order: SortOrder = "asc") -> List[FolderEntry]:
        return await self.store.list_folders(scope, sort_key, order)

    async def list_files(self, scope: Scope, sort_key: SortKey = "name", order: SortOrder = "asc") -> List[File]:
        return await self.store.list_files(scope, sort_key, order)

    async def resolve_scope(self, owner_id: str, parent_id: RawId) -> Scope:
        return await self.store.resolve_scope(owner_id, parent_id)

    async def get_folder(self, owner_id: str, folder_id: RawId) -> FolderEntry:
        return await self.store.describe_folder(await self.store.get_folder(owner_id, folder_id))

    async def get_file(self, owner_id: str, file_id: RawId) -> File:
        return await self.store.get_file(owner_id, file_id)

    async def create_folder(self, owner_id: str, parent_id: RawId, name: str) -> Folder:
        return await self.store.create_folder(owner_id, parent_id, name)

    async def rename_folder(self, owner_id: str, folder_id: RawId, new_name: str) -> Folder:
        return await self.store.rename_folder(owner_id, folder_id, new_name)

    async def move_folder(self, owner_id: str, folder_id: RawId, new_parent_id: RawId) -> Folder:
        return await self.store.move_folder(owner_id, folder_id, new_parent_id)

    async def delete_folder(self, owner_id: str, folder_id: RawId) -> None:
        await self.store.delete_folder(owner_id, folder_id)

    async def breadcrumbs(self, owner_id: str, folder_id: RawId) -> List[Crumb]:
        return await self.store.breadcrumbs(owner_id, folder_id)

    async def rename_file(self, owner_id: str, file_id: RawId, new_name: str) -> File:
        return await self.store.rename_file(owner_id, file_id, new_name)

    async def move_file(self, owner_id: str, file_id: RawId, new_folder_id: RawId) -> File:
        return await self.store.move_file(owner_id, file_id, new_folder_id)

    async def delete_file(self, owner_id: str, file_id: RawId) -> None:
        await self.store.delete_file(owner_id, file_id)
