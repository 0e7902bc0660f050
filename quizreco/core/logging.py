# quizreco/core/logging.py
import logging
import sys
from typing import TextIO, Optional, Union

import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Libraries that log every outgoing request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "redis")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """
    Install a single colored handler on the root logger.

    Calling it again replaces the handler, so reloading the app (uvicorn --reload,
    TestClient) never duplicates log lines.
    """
    lvl = _resolve_level(level)

    handler = colorlog.StreamHandler(stream or sys.stdout)
    handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))

    root_logger = logging.getLogger()
    root_logger.setLevel(lvl)
    root_logger.handlers = [handler]

    logging.getLogger("uvicorn.error").setLevel(lvl)
    logging.getLogger("uvicorn.access").setLevel(lvl)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(lvl, logging.WARNING))
