# File: tests/test_logger.py
import logging

from site_mirror.logger import LOGGER_NAME, init_logging


def test_log_file_receives_records(tmp_path):
    log_file = tmp_path / "mirror.log"
    lg = init_logging(level="DEBUG", log_file=log_file, log_format="%(levelname)s %(message)s")
    try:
        lg.debug("saved %s", "index.html")
        for handler in lg.handlers:
            handler.flush()
        assert log_file.read_text(encoding="utf-8").strip() == "DEBUG saved index.html"
        assert lg.level == logging.DEBUG
    finally:
        init_logging()


def test_reinit_replaces_handlers(tmp_path):
    lg = init_logging(log_file=tmp_path / "a.log")
    assert len(lg.handlers) == 2
    lg = init_logging()
    assert len(lg.handlers) == 1
    assert lg is logging.getLogger(LOGGER_NAME)
    assert lg.propagate is False
