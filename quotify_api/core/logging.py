import logging
import sys
from typing import Optional
from .config import settings


LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

# third-party loggers that drown out request logs at DEBUG
_NOISY = ("sqlalchemy.engine", "aiosqlite", "asyncpg", "passlib", "multipart")


def setup_logging(level: Optional[int] = None) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    if level is None:
        level = logging.DEBUG if settings.DEBUG else logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # uvicorn --reload imports the app twice
    root.handlers = []
    root.addHandler(handler)

    for name in _NOISY:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    # route uvicorn's own loggers through the same handler
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv = logging.getLogger(name)
        uv.handlers = []
        uv.propagate = True
