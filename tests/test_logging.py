"""Structured log line shape."""

import json
import logging
from datetime import date

from adsight.core.logging import JSONFormatter, build_formatter, get_logger


def _record(**extra):
    record = logging.LogRecord(
        "adsight.test", logging.INFO, __file__, 1, "Fetched %s rows", (12,), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_known_extras_are_lifted(self):
        line = JSONFormatter().format(_record(dataset="daily", rows=12, other="x"))
        entry = json.loads(line)
        assert entry["message"] == "Fetched 12 rows"
        assert entry["level"] == "INFO"
        assert entry["dataset"] == "daily"
        assert entry["rows"] == 12
        assert "other" not in entry

    def test_non_json_values_are_stringified(self):
        entry = json.loads(JSONFormatter().format(_record(endpoint=date(2025, 3, 15))))
        assert entry["endpoint"] == "2025-03-15"


class TestFormatterChoice:
    def test_text_format(self):
        formatter = build_formatter("TEXT")
        assert not isinstance(formatter, JSONFormatter)
        assert "Fetched 12 rows" in formatter.format(_record())

    def test_defaults_to_json(self):
        assert isinstance(build_formatter("json"), JSONFormatter)
        assert isinstance(build_formatter("anything"), JSONFormatter)

    def test_logger_is_namespaced_once(self):
        first = get_logger("test.namespaced")
        second = get_logger("test.namespaced")
        assert first is second
        assert first.name == "adsight.test.namespaced"
        assert len(first.handlers) == 1
