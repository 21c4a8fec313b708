"""
Unit tests for logging configuration.
"""

import json
import logging
import sys

from hivemall_spark.utils.logging_config import (
    ROOT_LOGGER,
    StructuredFormatter,
    build_logging_config,
    setup_logging,
)


def make_record(msg="registered %s", args=("train_arow",), exc_info=None, **extra):
    record = logging.LogRecord(
        name="hivemall_spark.catalog", level=logging.INFO, pathname=__file__,
        lineno=42, msg=msg, args=args, exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:

    def test_format_is_json(self):
        entry = json.loads(StructuredFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "hivemall_spark.catalog"
        assert entry["message"] == "registered train_arow"
        assert entry["line_number"] == 42
        assert entry["stack_trace"] is None
        assert entry["extra_data"] is None

    def test_extra_fields(self):
        record = make_record(function_name="train_arow", session="app-1")

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["extra_data"] == {"function_name": "train_arow", "session": "app-1"}

    def test_extra_fields_can_be_excluded(self):
        record = make_record(function_name="train_arow")
        entry = json.loads(StructuredFormatter(include_extra=False).format(record))
        assert entry["extra_data"] is None

    def test_stack_trace(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record(exc_info=sys.exc_info())

        entry = json.loads(StructuredFormatter().format(record))

        assert "RuntimeError: boom" in entry["stack_trace"]


class TestSetupLogging:

    def test_build_config(self):
        config = build_logging_config("debug", json_format=True)

        assert config["handlers"]["console"]["formatter"] == "json"
        assert config["loggers"][ROOT_LOGGER]["level"] == "DEBUG"
        assert config["loggers"][ROOT_LOGGER]["propagate"] is False
        assert "file" not in config["handlers"]

    def test_build_config_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "hivemall.log"

        config = build_logging_config(log_file=log_file)

        assert config["handlers"]["file"]["filename"] == str(log_file)
        assert config["loggers"][ROOT_LOGGER]["handlers"] == ["console", "file"]
        assert log_file.parent.is_dir()

    def test_setup_logging(self):
        logger = setup_logging("ERROR")

        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.ERROR
        assert not logger.propagate
        assert logging.getLogger("hivemall_spark.mix").getEffectiveLevel() == logging.ERROR

    def test_numeric_level(self):
        assert setup_logging(logging.DEBUG).level == logging.DEBUG

    def test_json_file_output(self, tmp_path):
        log_file = tmp_path / "hivemall.log"
        logger = setup_logging("INFO", json_format=True, log_file=log_file)

        logging.getLogger("hivemall_spark.catalog").info("registered %s", "mae")
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "registered mae"
        assert entry["logger"] == "hivemall_spark.catalog"
