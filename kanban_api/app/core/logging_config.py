"""
Logging setup for the Kanban API.

``setup_logging`` attaches a console handler (and a file handler when
``LOG_FILE`` is set) to the root logger, once per process.  Modules log
through ``logging.getLogger(__name__)``.  The HTTP libraries underneath
the Supabase client log every platform round trip; they are held at
WARNING unless the API itself runs at DEBUG.
"""

import logging
from pathlib import Path
from typing import List, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers of the Supabase client's transport stack.
PLATFORM_LOGGERS = ("httpx", "httpcore", "hpack")


def _handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> bool:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to INFO.
    logfile : Optional[str]
        Optional path of a log file written in addition to the console.

    Returns
    -------
    bool
        ``False`` when the root logger already had handlers and was left
        untouched, ``True`` otherwise.
    """
    root = logging.getLogger()
    if root.handlers:
        return False

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _handlers(logfile):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    platform_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in PLATFORM_LOGGERS:
        logging.getLogger(name).setLevel(platform_level)
    logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(numeric_level))
    return True
