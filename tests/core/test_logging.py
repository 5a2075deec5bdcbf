from __future__ import annotations

import json
import logging
import sys

import pytest

from signlearn.core.logging import _ContainerFormatter, _JsonFormatter, setup_logging


def _record(level: int = logging.INFO, msg: str = "hello", **attrs: object):
    record = logging.LogRecord(
        name="signlearn.test",
        level=level,
        pathname="svc.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("bogus", logging.INFO)],
)
def test_setup_logging_root_level(name: str, expected: int) -> None:
    setup_logging(name)
    root = logging.getLogger()
    assert root.level == expected
    assert len(root.handlers) == 1


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.WARNING), ("error", logging.ERROR)],
)
def test_noisy_loggers_never_below_warning(name: str, expected: int) -> None:
    setup_logging(name)
    for noisy in ("uvicorn", "sqlalchemy.engine", "httpx"):
        assert logging.getLogger(noisy).level == expected


def test_setup_logging_picks_json_formatter() -> None:
    setup_logging("info", json_format=True)
    assert isinstance(logging.getLogger().handlers[0].formatter, _JsonFormatter)
    setup_logging("info")
    assert isinstance(logging.getLogger().handlers[0].formatter, _ContainerFormatter)


@pytest.mark.parametrize(
    ("level", "has_location"),
    [(logging.INFO, False), (logging.WARNING, True), (logging.ERROR, True)],
)
def test_container_location_suffix(level: int, has_location: bool) -> None:
    line = _ContainerFormatter().format(_record(level))
    assert "hello" in line
    assert ("[svc.py:42]" in line) is has_location


def test_container_shows_request_id_only_inside_request() -> None:
    fmt = _ContainerFormatter()
    assert "[req-7]" in fmt.format(_record(request_id="req-7"))
    assert "[-]" not in fmt.format(_record(request_id="-"))


def test_container_appends_traceback() -> None:
    try:
        raise RuntimeError("kaboom")
    except RuntimeError:
        record = _record(logging.ERROR, exc_info=sys.exc_info())
    assert "RuntimeError: kaboom" in _ContainerFormatter().format(record)


def test_json_lifts_context_fields() -> None:
    record = _record(
        msg="Course completed", request_id="req-1", course_id="alphabet-basics"
    )
    entry = json.loads(_JsonFormatter().format(record))
    assert entry["message"] == "Course completed"
    assert entry["level"] == "INFO"
    assert entry["request_id"] == "req-1"
    assert entry["course_id"] == "alphabet-basics"
    assert "user_id" not in entry


def test_json_drops_placeholder_request_id() -> None:
    entry = json.loads(_JsonFormatter().format(_record(request_id="-")))
    assert "request_id" not in entry
