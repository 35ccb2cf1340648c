from drivehub.crud.base import BaseCRUD
from drivehub.crud.user import UserCRUD
from drivehub.crud.folder import FolderCRUD
from drivehub.crud.file import FileCRUD

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "FolderCRUD",
    "FileCRUD",
]
