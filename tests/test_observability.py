"""Tests for observability utilities."""

import json
import logging

from familiar.observability.logging import JsonFormatter, get_logger
from familiar.observability.revision import reset_revision, set_revision


def _record(msg="ddl plan built", **extra_fields):
    record = logging.LogRecord("familiar.engine", logging.INFO, __file__, 1, msg, None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        out = json.loads(JsonFormatter().format(_record()))
        assert out["level"] == "INFO"
        assert out["logger"] == "familiar.engine"
        assert out["message"] == "ddl plan built"
        assert "revision" not in out

    def test_extra_fields_merged(self):
        out = json.loads(JsonFormatter().format(_record(operation="update", version=2)))
        assert out["operation"] == "update"
        assert out["version"] == 2

    def test_revision_included(self):
        token = set_revision("003_update_views")
        try:
            out = json.loads(JsonFormatter().format(_record()))
        finally:
            reset_revision(token)
        assert out["revision"] == "003_update_views"


class TestGetLogger:
    def test_single_handler(self):
        logger = get_logger("familiar.test_single_handler")
        get_logger("familiar.test_single_handler")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)
        assert logger.propagate is False
