from drivehub.services.blob_store import BlobStore, BlobRef, MinioBlobStore
from drivehub.services.auth_service import AuthService
from drivehub.services.hierarchy_store import HierarchyStore, FolderEntry
from drivehub.services.hierarchy_service import HierarchyService, UploadPolicy, ContentLocation

__all__ = [
    "BlobStore",
    "BlobRef",
    "MinioBlobStore",
    "AuthService",
    "HierarchyStore",
    "FolderEntry",
    "HierarchyService",
    "UploadPolicy",
    "ContentLocation",
]
