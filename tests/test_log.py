import logging
import re

import pytest

from display_switcher.log import setup_logging


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("display_switcher")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_writes_timestamped_lines_to_file(restore_logger, tmp_path) -> None:
    log_file = tmp_path / "share" / "log.txt"
    setup_logging(debug=True, log_file=str(log_file))

    logging.getLogger("display_switcher.prober").debug("Connector: %s, Status: %s", "DP-1", "connected")
    for handler in restore_logger.handlers:
        handler.flush()

    line = log_file.read_text().strip()
    assert re.fullmatch(r"\[\d{4}-\d\d-\d\d \d\d:\d\d:\d\d\] Connector: DP-1, Status: connected", line)


def test_info_level_by_default_and_single_setup(restore_logger, tmp_path) -> None:
    setup_logging(log_file=str(tmp_path / "log.txt"))
    setup_logging(log_file=str(tmp_path / "log.txt"))

    assert restore_logger.level == logging.INFO
    assert len(restore_logger.handlers) == 2


def test_unwritable_log_file_falls_back_to_console(restore_logger, tmp_path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("")
    setup_logging(log_file=str(blocker / "log.txt"))

    assert len(restore_logger.handlers) == 1
