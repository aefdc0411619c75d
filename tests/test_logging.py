import json
import logging
import sys

from notecraft.logging import JsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("notecraft.storage", logging.WARNING, __file__, 1, "Write %s", ("failed",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_stable_keys() -> None:
    line = JsonFormatter("notecraft", "test").format(_record())
    data = json.loads(line)
    assert data["level"] == "WARNING"
    assert data["logger"] == "notecraft.storage"
    assert data["service"] == "notecraft"
    assert data["environment"] == "test"
    assert data["message"] == "Write failed"
    assert data["timestamp"].endswith("Z")


def test_formatter_merges_extras() -> None:
    data = json.loads(JsonFormatter("svc", "dev").format(_record(key="notecraft-draft", path=object())))
    assert data["key"] == "notecraft-draft"
    assert data["path"].startswith("<object")


def test_formatter_reports_exceptions() -> None:
    try:
        raise ValueError("bad value")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "oops", None, sys.exc_info())
    data = json.loads(JsonFormatter("svc", "dev").format(record))
    assert data["error"] == {"class": "ValueError", "message": "bad value"}
