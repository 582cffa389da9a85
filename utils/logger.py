# utils/logger.py
# CodeMentor — Structured JSON logger used by every module.
# Imports from: nothing (zero internal dependencies).

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

_ROOT_NAME = "codementor"

# Standard LogRecord fields; anything else on a record came from `extra`.
_STANDARD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "component"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line: ts, level, component, event, then the kwargs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts":        datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level":     record.levelname,
            "component": getattr(record, "component", record.name),
            "event":     record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _STANDARD_FIELDS:
                payload.setdefault(key, value)
        if record.exc_info and "traceback" not in payload:
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _root_logger() -> logging.Logger:
    """
    Returns the `codementor` parent logger, attaching the stdout JSON handler
    the first time. Child loggers propagate here, so the handler exists once.
    """
    root = logging.getLogger(_ROOT_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        root.propagate = False
    return root


def configure_logging(level: str = "INFO") -> None:
    """Sets the level for every CodeMentor logger. Unknown names fall back to INFO."""
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    _root_logger().setLevel(resolved)


def get_logger(component: str) -> "CodeMentorLogger":
    """
    Factory function. Every module obtains its logger once at import time.

    Usage:
        from utils.logger import get_logger
        log = get_logger("ai.explainer")
        log.info("explain_request", language="python", mode="simple")
    """
    return CodeMentorLogger(component)


class CodeMentorLogger:
    """
    Thin wrapper around a stdlib Logger that:
    - Injects `component` into every record
    - Accepts arbitrary kwargs as structured fields
    """

    def __init__(self, component: str) -> None:
        _root_logger()
        self.component = component
        self._logger = logging.getLogger(f"{_ROOT_NAME}.{component}")

    def _extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        kwargs["component"] = self.component
        return kwargs

    def debug(self, event: str, **kwargs: Any) -> None:
        self._logger.debug(event, extra=self._extra(kwargs))

    def info(self, event: str, **kwargs: Any) -> None:
        self._logger.info(event, extra=self._extra(kwargs))

    def warning(self, event: str, **kwargs: Any) -> None:
        self._logger.warning(event, extra=self._extra(kwargs))

    def error(self, event: str, **kwargs: Any) -> None:
        self._logger.error(event, extra=self._extra(kwargs))

    def exception(self, event: str, **kwargs: Any) -> None:
        """Logs ERROR level with the active traceback attached."""
        kwargs["traceback"] = traceback.format_exc()
        self._logger.error(event, extra=self._extra(kwargs))
