"""Structured logging: JSON lines with domain extras, single handler."""

import json
import logging

from dentalect.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "dentalect.test", logging.INFO, __file__, 1, "File added", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "dentalect.test"
    assert payload["message"] == "File added"
    assert "timestamp" in payload


def test_json_formatter_surfaces_extras():
    payload = json.loads(JSONFormatter().format(
        _record(subject_id="s1", file_id="f1", unrelated="x"),
    ))
    assert payload["subject_id"] == "s1"
    assert payload["file_id"] == "f1"
    assert "unrelated" not in payload


def test_setup_logging_does_not_stack_handlers():
    original = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("WARNING", "text")
        ours = [h for h in logging.root.handlers if h.get_name() == "dentalect"]
        assert len(ours) == 1
        assert not isinstance(ours[0].formatter, JSONFormatter)
        assert logging.root.level == logging.WARNING
    finally:
        logging.root.handlers[:] = original
        logging.root.setLevel(level)
