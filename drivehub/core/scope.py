"""Explicit scope values for sibling-level operations.

A scope is the ``(owner_id, parent)`` pair inside which folder and file
names must be unique. Listing, creation and duplicate checks all take one.
"""
from dataclasses import dataclass
from typing import Optional, Union

from bson import ObjectId
from bson.errors import InvalidId

ROOT_ALIASES = (None, "", "root", "null")


@dataclass(frozen=True)
class RootScope:
    owner_id: str

    @property
    def parent_id(self) -> None:
        return None


@dataclass(frozen=True)
class FolderScope:
    owner_id: str
    folder_id: ObjectId

    @property
    def parent_id(self) -> ObjectId:
        return self.folder_id


Scope = Union[RootScope, FolderScope]


def scope_of(owner_id: str, folder_id: Optional[ObjectId]) -> Scope:
    """Build the scope for an already-typed parent reference."""
    if folder_id is None:
        return RootScope(owner_id)
    return FolderScope(owner_id, folder_id)


def parse_object_id(raw: Union[str, ObjectId, None]) -> Optional[ObjectId]:
    """Return an ObjectId for ``raw`` or None when it is not a valid id."""
    if isinstance(raw, ObjectId):
        return raw
    if not raw:
        return None
    try:
        return ObjectId(raw)
    except (InvalidId, TypeError):
        return None


def is_root(raw: Union[str, ObjectId, None]) -> bool:
    return raw in ROOT_ALIASES
