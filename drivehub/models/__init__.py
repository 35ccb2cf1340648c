from drivehub.models.mixins import TimeMixin, SoftDeleteMixin
from drivehub.models.user import User
from drivehub.models.folder import Folder
from drivehub.models.file import File

__all__ = [
    "TimeMixin",
    "SoftDeleteMixin",
    "User",
    "Folder",
    "File",
]

# List of all document models for Beanie initialization
DOCUMENT_MODELS = [
    User,
    Folder,
    File,
]
