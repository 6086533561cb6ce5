"""Tests for logging setup."""

import logging

from cable_params.logging_config import setup_logging


def _reset(logger):
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_setup_logging_is_idempotent():
    logger = logging.getLogger("cable_params")
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
    finally:
        _reset(logger)


def test_setup_logging_writes_file(tmp_path):
    logger = logging.getLogger("cable_params")
    log_file = tmp_path / "cable.log"
    try:
        setup_logging(logging.INFO, log_file=str(log_file))
        logging.getLogger("cable_params.datamodel").info("hello")
        assert len(logger.handlers) == 2
    finally:
        _reset(logger)
    text = log_file.read_text(encoding="utf-8")
    assert "Logging initialized." in text
    assert "cable_params.datamodel - INFO - hello" in text
