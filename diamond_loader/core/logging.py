# diamond_loader/core/logging.py
import logging
import sys

from diamond_loader.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    level = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    # uvicorn may have installed handlers already
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
