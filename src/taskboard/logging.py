"""Log output for taskboard.

Package modules log through ``logging.getLogger("taskboard.<part>")`` and
never configure handlers themselves. ``setup_logging`` is the opt-in switch
that ``create_board_store`` flips when a log directory or level is
configured; it only ever replaces the handlers it installed earlier, so an
application's own handlers on the ``taskboard`` logger survive.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "taskboard"
LOG_FILE_NAME = "taskboard.log"
FALLBACK_LOG_DIR = "logs"

# One snapshot payload can hold every board of a user; keep rotation small.
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

# Stored payloads quoted in warnings are cut to this many characters.
PAYLOAD_PREVIEW_CHARS = 200

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_OWNED_MARKER = "_taskboard_owned"


def level_from_name(name: str) -> int:
    """Resolve a level name such as "debug" to its numeric value.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{name}'")
    return level


def _owned(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _OWNED_MARKER, True)
    return handler


def _drop_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED_MARKER, False):
            logger.removeHandler(handler)
            handler.close()


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = False,
) -> logging.Logger:
    """Send taskboard logs to a rotating file, and optionally to stderr.

    Args:
        log_dir: Directory for ``taskboard.log``; created if missing.
            Defaults to ``logs`` under the working directory.
        level: Level name; defaults to INFO.
        console: Also write to stderr.

    Returns:
        The ``taskboard`` logger.
    """
    log_path = Path(log_dir if log_dir is not None else FALLBACK_LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)
    log_level = level_from_name(level) if level else logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level)
    _drop_owned_handlers(logger)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path / LOG_FILE_NAME,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(_owned(handler))

    logger.debug("Logging to %s at %s", log_path / LOG_FILE_NAME, logging.getLevelName(log_level))
    return logger


def preview_payload(payload: str, limit: int = PAYLOAD_PREVIEW_CHARS) -> str:
    """Shorten a stored payload for a log line, noting how much was cut."""
    if len(payload) <= limit:
        return payload
    return f"{payload[:limit]}... (+{len(payload) - limit} chars)"
