import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# attributes every LogRecord has; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# third-party loggers and the level they are capped at
NOISY_LOGGERS = {
    "uvicorn.access": logging.INFO,
    "uvicorn.error": logging.INFO,
    "fastapi": logging.INFO,
    "pymongo": logging.WARNING,
    "motor": logging.WARNING,
    "minio": logging.WARNING,
    "urllib3": logging.WARNING,
    "httpx": logging.WARNING,
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line; ``extra`` fields such as owner_id are kept"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter for dev, level names coloured"""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self):
        super().__init__(fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s", datefmt="%H:%M:%S")

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        line = super().formatMessage(record)
        return line.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


def setup_logging(
    level: str = "INFO",
    app_name: str = "DriveHub",
    enable_json: bool = False,
    log_file: str | None = None
) -> None:
    """
    Route all logging through the root logger

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        app_name: Name of the logger that announces the configuration
        enable_json: JSON lines on stdout instead of coloured text
        log_file: Optional path that also receives JSON lines
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(JSONFormatter() if enable_json else ColoredFormatter())
    handlers.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for name, cap in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(cap, numeric_level))

    logging.getLogger(app_name).info(f"Logging configured - level {logging.getLevelName(numeric_level)}")


def get_logger(name: str) -> logging.Logger:
    """Module logger, use with ``__name__``"""
    return logging.getLogger(name)
