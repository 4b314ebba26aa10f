"""Configuration loading for taskboard.

Settings come from ``TASKBOARD_*`` environment variables with defaults
suitable for a local single-user install.
"""

from __future__ import annotations

import atexit
import os
from collections.abc import Mapping
from dataclasses import dataclass

from taskboard.board_store import BoardStore
from taskboard.logging import level_from_name, setup_logging
from taskboard.persistence import DEFAULT_NAMESPACE, Database, SaveQueue, SnapshotAdapter

DEFAULT_DB_PATH = "taskboard.db"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{value}'")


@dataclass(frozen=True)
class TaskboardConfig:
    """Runtime settings.

    Attributes:
        db_path: SQLite database file. ":memory:" keeps everything in process.
        namespace: Prefix of the per-user storage key.
        write_behind: Persist through a background SaveQueue instead of inline.
        log_dir: Directory for rotating log files (None = logging default).
        log_level: Log level name (None = logging default).
    """

    db_path: str = DEFAULT_DB_PATH
    namespace: str = DEFAULT_NAMESPACE
    write_behind: bool = False
    log_dir: str | None = None
    log_level: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TaskboardConfig:
        """Build config from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Parsed configuration.

        Raises:
            ConfigError: If a value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        namespace = env.get("TASKBOARD_NAMESPACE", DEFAULT_NAMESPACE).strip()
        if not namespace:
            raise ConfigError("TASKBOARD_NAMESPACE must not be empty")

        log_level = env.get("TASKBOARD_LOG_LEVEL") or None
        if log_level is not None:
            try:
                level_from_name(log_level)
            except ValueError as e:
                raise ConfigError(f"TASKBOARD_LOG_LEVEL: {e}") from e

        return cls(
            db_path=env.get("TASKBOARD_DB_PATH", DEFAULT_DB_PATH),
            namespace=namespace,
            write_behind=_parse_bool(
                "TASKBOARD_WRITE_BEHIND", env.get("TASKBOARD_WRITE_BEHIND", "")
            ),
            log_dir=env.get("TASKBOARD_LOG_DIR") or None,
            log_level=log_level,
        )


def create_board_store(config: TaskboardConfig | None = None) -> BoardStore:
    """Wire a BoardStore with its persistence layer from config.

    Logging is configured only when log_dir or log_level is set, so an
    application that sets up logging itself is left alone.

    With write_behind, the save queue's worker is a daemon thread. Its
    close() is registered with atexit so saves still queued at a normal
    interpreter exit are written; call store.close() to flush earlier.

    Args:
        config: Settings to use. Defaults to TaskboardConfig.from_env().

    Returns:
        An unbound BoardStore. Call bind(user_id) once a user is known.
    """
    if config is None:
        config = TaskboardConfig.from_env()

    if config.log_dir is not None or config.log_level is not None:
        setup_logging(log_dir=config.log_dir, level=config.log_level)

    database = Database(config.db_path)
    database.create_tables()
    adapter = SnapshotAdapter(database, namespace=config.namespace)

    save_queue = None
    if config.write_behind:
        save_queue = SaveQueue(adapter)
        atexit.register(save_queue.close)
    return BoardStore(adapter, save_queue=save_queue)
