import logging

import pytest

from src.config.schemas import LogDestination, LogFileConfig, LoggingConfig
from src.helpers.logger import DetailedFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, DetailedFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_stdout_destination():
    setup_logging(LoggingConfig(level="warning"))

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, DetailedFormatter)


def test_file_destination_writes_caller_info(tmp_path):
    log_file = tmp_path / "logs" / "dd.log"
    config = LoggingConfig(destination=LogDestination.BOTH, file=LogFileConfig(path=str(log_file)))

    setup_logging(config)
    logging.getLogger("src.test").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text()
    assert "hello" in content
    assert "test_logging_setup.test_file_destination_writes_caller_info" in content


def test_invalid_level_rejected():
    with pytest.raises(ValueError):
        LoggingConfig(level="chatty")
