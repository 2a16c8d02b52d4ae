import logging
import sys
from .config import settings


LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)


def setup_logging() -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    # the agents CLI may install its own handler first
    root.handlers = []
    root.addHandler(handler)

    # the media SDK is chatty at DEBUG
    logging.getLogger("livekit").setLevel(logging.INFO)
