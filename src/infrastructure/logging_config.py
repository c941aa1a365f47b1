"""Process-wide logging setup shared by the API and the notification worker."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO") -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # avoid duplicate lines when called twice (reload, tests)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)
    root_logger.addHandler(handler)

    for noisy in ("httpx", "httpcore", "hpack", "urllib3", "websockets"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
