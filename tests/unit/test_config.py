"""Unit tests for configuration loading."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from taskboard.board_store import BoardStore
from taskboard.config import ConfigError, TaskboardConfig, create_board_store
from taskboard.persistence import DEFAULT_NAMESPACE


@pytest.mark.unit
class TestFromEnv:
    """Tests for TaskboardConfig.from_env."""

    def test_defaults(self) -> None:
        config = TaskboardConfig.from_env({})

        assert config.db_path == "taskboard.db"
        assert config.namespace == DEFAULT_NAMESPACE
        assert config.write_behind is False
        assert config.log_dir is None
        assert config.log_level is None

    def test_overrides(self) -> None:
        config = TaskboardConfig.from_env(
            {
                "TASKBOARD_DB_PATH": "/tmp/boards.db",
                "TASKBOARD_NAMESPACE": "boards",
                "TASKBOARD_WRITE_BEHIND": "yes",
                "TASKBOARD_LOG_DIR": "/tmp/logs",
                "TASKBOARD_LOG_LEVEL": "DEBUG",
            }
        )

        assert config.db_path == "/tmp/boards.db"
        assert config.namespace == "boards"
        assert config.write_behind is True
        assert config.log_dir == "/tmp/logs"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["0", "false", "No", "off"])
    def test_write_behind_false_values(self, value: str) -> None:
        assert TaskboardConfig.from_env({"TASKBOARD_WRITE_BEHIND": value}).write_behind is False

    def test_invalid_bool_raises(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            TaskboardConfig.from_env({"TASKBOARD_WRITE_BEHIND": "sometimes"})

        assert "TASKBOARD_WRITE_BEHIND" in str(exc_info.value)

    def test_blank_namespace_raises(self) -> None:
        with pytest.raises(ConfigError):
            TaskboardConfig.from_env({"TASKBOARD_NAMESPACE": "   "})

    def test_unknown_log_level_raises(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            TaskboardConfig.from_env({"TASKBOARD_LOG_LEVEL": "chatty"})

        assert "TASKBOARD_LOG_LEVEL" in str(exc_info.value)

    def test_blank_log_settings_are_unset(self) -> None:
        config = TaskboardConfig.from_env({"TASKBOARD_LOG_DIR": "", "TASKBOARD_LOG_LEVEL": ""})

        assert config.log_dir is None
        assert config.log_level is None


@pytest.mark.unit
class TestCreateBoardStore:
    """Tests for create_board_store wiring."""

    def test_returns_unbound_store(self) -> None:
        store = create_board_store(TaskboardConfig(db_path=":memory:"))

        assert isinstance(store, BoardStore)
        assert store.is_bound is False

    def test_store_is_usable(self) -> None:
        store = create_board_store(TaskboardConfig(db_path=":memory:", namespace="test"))

        result = store.bind("user-1")

        assert result.ok
        assert len(store.boards) == 1

    def test_write_behind_store(self) -> None:
        with patch("taskboard.config.atexit.register"):
            store = create_board_store(TaskboardConfig(db_path=":memory:", write_behind=True))
        try:
            store.bind("user-1")
            result = store.create_board("Queued")
            assert result.ok
            assert result.persisted
        finally:
            store.close()

    def test_log_settings_configure_logging(self, tmp_path: Path) -> None:
        logger = logging.getLogger("taskboard")
        try:
            create_board_store(
                TaskboardConfig(db_path=":memory:", log_dir=str(tmp_path), log_level="DEBUG")
            )

            assert (tmp_path / "taskboard.log").exists()
            assert logger.level == logging.DEBUG
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)

    def test_write_behind_queue_closed_at_exit(self, tmp_path: Path) -> None:
        """Saves still queued when the interpreter exits are written."""
        db_path = str(tmp_path / "boards.db")
        with patch("taskboard.config.atexit.register") as register:
            store = create_board_store(TaskboardConfig(db_path=db_path, write_behind=True))
        store.bind("user-1")
        store.create_board("Queued before exit")

        (close_at_exit,) = register.call_args.args
        close_at_exit()

        reloaded = create_board_store(TaskboardConfig(db_path=db_path))
        reloaded.bind("user-1")
        assert [b.title for b in reloaded.boards][-1] == "Queued before exit"

    def test_inline_store_registers_nothing_at_exit(self) -> None:
        with patch("taskboard.config.atexit.register") as register:
            create_board_store(TaskboardConfig(db_path=":memory:"))

        register.assert_not_called()
