"""Name rules for folders and files, plus the sort key used by listings."""
import os
import re
import secrets
import string
import time
from typing import List, Union

from drivehub.core.exceptions import ValidationError

MAX_FOLDER_NAME_LENGTH = 100
MAX_FILE_NAME_LENGTH = 255

INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')
RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

_DIGITS = re.compile(r"(\d+)")
_UNSAFE_STORED_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


def validate_folder_name(name: str) -> str:
    """Return the trimmed folder name or raise ValidationError."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Folder name is required", field="name")
    if len(trimmed) > MAX_FOLDER_NAME_LENGTH:
        raise ValidationError(
            f"Folder name cannot exceed {MAX_FOLDER_NAME_LENGTH} characters", field="name")
    if INVALID_NAME_CHARS.search(trimmed):
        raise ValidationError('Folder name cannot contain any of < > : " / \\ | ? *', field="name")
    if trimmed.upper() in RESERVED_NAMES:
        raise ValidationError(f"'{trimmed}' is a reserved name", field="name")
    return trimmed


def validate_file_name(name: str) -> str:
    """Return the trimmed display name of a file or raise ValidationError."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("File name is required", field="originalName")
    if len(trimmed) > MAX_FILE_NAME_LENGTH:
        raise ValidationError(
            f"File name cannot exceed {MAX_FILE_NAME_LENGTH} characters", field="originalName")
    return trimmed


def folder_name_key(name: str) -> str:
    return name.casefold()


def natural_sort_key(name: str) -> List[Union[int, str]]:
    """Case-insensitive key that compares digit runs numerically.

    ``re.split`` with a capture group always puts text at even positions and
    digits at odd ones, so keys of different names stay comparable.
    """
    parts = _DIGITS.split(name.casefold())
    return [int(part) if i % 2 else part for i, part in enumerate(parts)]


def generate_stored_name(original_name: str) -> str:
    """``{millis}_{random6}_{safe base}{ext}``, unique enough to never collide in practice."""
    base, ext = os.path.splitext(original_name)
    safe_base = _UNSAFE_STORED_CHARS.sub("_", base)
    suffix = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(6))
    return f"{int(time.time() * 1000)}_{suffix}_{safe_base}{ext}"
