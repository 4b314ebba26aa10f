"""Unit tests for taskboard logging configuration."""

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from taskboard.logging import (
    LOG_FILE_NAME,
    PAYLOAD_PREVIEW_CHARS,
    level_from_name,
    preview_payload,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_taskboard_logger() -> Iterator[None]:
    """Detach handlers added during a test so other tests see a clean logger."""
    yield
    logger = logging.getLogger("taskboard")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def read_log(log_dir: Path) -> str:
    for handler in logging.getLogger("taskboard").handlers:
        handler.flush()
    return (log_dir / LOG_FILE_NAME).read_text()


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_creates_nested_log_directory(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "var" / "log"

        setup_logging(log_dir=log_dir)

        assert (log_dir / LOG_FILE_NAME).exists()

    def test_component_loggers_share_the_file(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path)

        logging.getLogger("taskboard.board_store").info("create_board applied")
        logging.getLogger("taskboard.persistence").warning("unreadable snapshot")

        content = read_log(tmp_path)
        assert "| INFO     | taskboard.board_store | create_board applied" in content
        assert "| WARNING  | taskboard.persistence | unreadable snapshot" in content

    def test_defaults_to_info(self, tmp_path: Path) -> None:
        logger = setup_logging(log_dir=tmp_path)

        logging.getLogger("taskboard.board_store").debug("move_task skipped")

        assert logger.level == logging.INFO
        assert "move_task skipped" not in read_log(tmp_path)

    def test_level_name_is_case_insensitive(self, tmp_path: Path) -> None:
        logger = setup_logging(log_dir=tmp_path, level="debug")

        assert logger.level == logging.DEBUG

    def test_file_only_unless_console_requested(self, tmp_path: Path) -> None:
        logger = setup_logging(log_dir=tmp_path)

        assert [type(h) for h in logger.handlers] == [RotatingFileHandler]

    def test_console_handler_added(self, tmp_path: Path) -> None:
        logger = setup_logging(log_dir=tmp_path, console=True)

        assert len(logger.handlers) == 2

    def test_repeated_setup_replaces_own_handlers(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path, console=True)
        logger = setup_logging(log_dir=tmp_path)

        assert len(logger.handlers) == 1

    def test_application_handlers_are_kept(self, tmp_path: Path) -> None:
        """Handlers the embedding application attached are not removed."""
        logger = logging.getLogger("taskboard")
        app_handler = logging.NullHandler()
        logger.addHandler(app_handler)

        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)

        assert app_handler in logger.handlers
        assert len(logger.handlers) == 2

    def test_unknown_level_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            setup_logging(log_dir=tmp_path, level="chatty")


@pytest.mark.unit
class TestLevelFromName:
    """Tests for level_from_name."""

    @pytest.mark.parametrize(
        ("name", "level"),
        [("DEBUG", logging.DEBUG), (" warning ", logging.WARNING), ("error", logging.ERROR)],
    )
    def test_known_levels(self, name: str, level: int) -> None:
        assert level_from_name(name) == level

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            level_from_name("verbose")

        assert "verbose" in str(exc_info.value)


@pytest.mark.unit
class TestPreviewPayload:
    """Tests for preview_payload."""

    def test_short_payload_unchanged(self) -> None:
        assert preview_payload('{"boards": []}') == '{"boards": []}'

    def test_default_limit(self) -> None:
        payload = "x" * (PAYLOAD_PREVIEW_CHARS + 50)

        preview = preview_payload(payload)

        assert preview == "x" * PAYLOAD_PREVIEW_CHARS + "... (+50 chars)"

    def test_custom_limit(self) -> None:
        assert preview_payload("abcdef", limit=3) == "abc... (+3 chars)"
