"""
JSON log lines: core fields, structured kwargs, levels.
"""
import io
import json
import logging

import pytest

from utils.logger import JSONFormatter, configure_logging, get_logger


@pytest.fixture
def captured():
    """Attaches a JSON handler writing to a buffer; yields a reader for parsed lines."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    configure_logging("INFO")
    root = logging.getLogger("codementor")
    root.addHandler(handler)

    def _lines() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines()]

    yield _lines
    root.removeHandler(handler)
    configure_logging("INFO")


def test_info_line_has_core_fields_and_kwargs(captured):
    get_logger("ai.explainer").info("explain_request", language="python", line_count=2)

    line = captured()[-1]
    assert line["level"] == "INFO"
    assert line["component"] == "ai.explainer"
    assert line["event"] == "explain_request"
    assert line["language"] == "python"
    assert line["line_count"] == 2
    assert line["ts"].endswith("+00:00")
    assert "msg" not in line and "levelno" not in line


def test_kwargs_cannot_replace_core_fields(captured):
    get_logger("main").warning("request_failed", level="custom", status=400)

    line = captured()[-1]
    assert line["level"] == "WARNING"
    assert line["status"] == 400


def test_exception_attaches_traceback(captured):
    log = get_logger("main")
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        log.exception("request_unhandled_error")

    line = captured()[-1]
    assert line["level"] == "ERROR"
    assert "RuntimeError: boom" in line["traceback"]


def test_configure_logging_filters_below_level(captured):
    configure_logging("WARNING")
    log = get_logger("ai.gemini_client")
    log.info("gemini_call_complete")
    log.warning("gemini_timeout", timeout_s=5)

    assert [line["event"] for line in captured()] == ["gemini_timeout"]


def test_unknown_level_falls_back_to_info(captured):
    configure_logging("chatty")
    get_logger("main").info("codementor_startup_begin")

    assert [line["event"] for line in captured()] == ["codementor_startup_begin"]
