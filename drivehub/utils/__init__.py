from drivehub.utils.logging import get_logger, setup_logging
from drivehub.utils.api_response import ok, created
from drivehub.utils.file_classifier import FileClassifier


__all__ = [
    "get_logger",
    "setup_logging",
    "ok",
    "created",
    "FileClassifier",
]
