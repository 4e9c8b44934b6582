"""Package-level Loguru configuration."""

import io

import pytest

import tfstate_sources
from tfstate_sources import (
    LoggingConfigError,
    configure_console_logging,
    configure_file_logging,
    configure_test_logging,
    get_logger_state,
    initialize_logging,
    is_logging_initialized,
    is_test_mode,
    logger,
    reset_logging,
    validate_log_level,
)


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    for sink_id in get_logger_state().sink_ids:
        try:
            logger.remove(sink_id)
        except ValueError:
            pass
    get_logger_state().reset()


@pytest.mark.parametrize("level", ["debug", "INFO", "Warning", "TRACE", "critical"])
def test_validate_log_level_normalises(level):
    assert validate_log_level(level) == level.upper()


def test_validate_log_level_rejects_unknown():
    with pytest.raises(LoggingConfigError):
        validate_log_level("LOUD")


def test_auto_initialisation_is_skipped_under_pytest():
    assert tfstate_sources._is_pytest_running()


def test_console_logging_writes_to_destination():
    stream = io.StringIO()
    sink_id = configure_console_logging(
        level="DEBUG", destination=stream, colorize=False, format_template="{level}:{message}"
    )
    try:
        logger.debug("console sink check")
    finally:
        logger.remove(sink_id)

    assert "DEBUG:console sink check" in stream.getvalue()
    assert sink_id in get_logger_state().sink_ids


def test_console_logging_rejects_bad_level():
    with pytest.raises(LoggingConfigError):
        configure_console_logging(level="NOPE", destination=io.StringIO())


def test_console_logging_bad_level_is_not_wrapped():
    with pytest.raises(LoggingConfigError) as excinfo:
        configure_console_logging(level="NOPE", destination=io.StringIO())

    assert excinfo.value.__cause__ is None
    assert "Invalid log level" in str(excinfo.value)


def test_file_logging_rejects_bad_level_before_touching_disk(tmp_path):
    log_dir = tmp_path / "logs"

    with pytest.raises(LoggingConfigError) as excinfo:
        configure_file_logging(log_dir / "tfstate.log", level="NOPE")

    assert "Invalid log level" in str(excinfo.value)
    assert not log_dir.exists()


def test_file_logging_creates_parent_directory(tmp_path):
    log_file = tmp_path / "logs" / "nested" / "tfstate.log"

    sink_id = configure_file_logging(log_file, level="INFO")
    try:
        logger.info("file sink check")
    finally:
        logger.remove(sink_id)

    assert "file sink check" in log_file.read_text(encoding="utf-8")


def test_configure_test_logging_marks_test_mode():
    stream = io.StringIO()

    sink_ids = configure_test_logging(console_level="INFO", console_destination=stream)
    logger.debug("hidden")
    logger.info("shown")

    assert set(sink_ids) == {"console"}
    assert is_logging_initialized()
    assert is_test_mode()
    assert "shown" in stream.getvalue()
    assert "hidden" not in stream.getvalue()


def test_initialize_logging_honours_environment(monkeypatch):
    monkeypatch.setenv("TFSTATE_SOURCES_LOG_LEVEL", "WARNING")

    sink_ids = initialize_logging()

    assert "console" in sink_ids
    assert is_logging_initialized()
    assert not is_test_mode()


def test_initialize_logging_with_file(tmp_path):
    sink_ids = initialize_logging(console_level="ERROR", log_file=tmp_path / "out.log")

    assert set(sink_ids) == {"console", "file"}


def test_reset_logging_clears_state():
    configure_test_logging(console_destination=io.StringIO())

    reset_logging()

    assert not is_logging_initialized()
    assert get_logger_state().sink_ids == []
