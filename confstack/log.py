"""Structured logging on top of loguru.

Every record carries the application default fields (``app_name``,
``app_version``, ``environment``) plus whatever fields the caller passes.
Caller fields win over defaults on conflict.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional, TextIO, Union

from loguru import logger

from .errors import Code, get_code_description, is_valid_code

Fields = Dict[str, Any]

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | {extra}"
)

_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
    "fatal": "CRITICAL",
    "critical": "CRITICAL",
}

_default_fields: Fields = {
    "app_name": "unknown",
    "app_version": "unknown",
    "environment": "local",
}


@dataclass(frozen=True)
class LoggerConfig:
    app_name: str
    app_version: str = ""
    environment: str = ""


@dataclass
class _SinkState:
    sink: Union[TextIO, Any] = sys.stderr
    level: str = "INFO"
    fmt: str = "text"
    handler_id: Optional[int] = None


_state = _SinkState()


def initialize(config: LoggerConfig) -> None:
    """Record the application identity used as default fields."""
    _default_fields["app_name"] = config.app_name
    if config.app_version:
        _default_fields["app_version"] = config.app_version
    if config.environment:
        _default_fields["environment"] = config.environment


def default_fields() -> Fields:
    return dict(_default_fields)


def normalize_level(level: str) -> str:
    """Map a user level name onto a loguru level; unknown names mean INFO."""
    return _LEVELS.get(level.lower(), "INFO")


def configure(
    level: str = "INFO",
    fmt: str = "text",
    sink: Optional[Union[TextIO, Any]] = None,
) -> int:
    """Replace loguru's handlers with a single sink.

    ``LOGURU_LEVEL`` in the environment takes precedence over ``level``.
    ``fmt`` is ``"json"`` for serialized records, anything else gives the
    coloured text format.

    Returns:
        The loguru handler id of the new sink.
    """
    env_level = os.environ.get("LOGURU_LEVEL")
    if env_level:
        level = env_level
    _state.level = normalize_level(level)
    _state.fmt = "json" if fmt.lower() == "json" else "text"
    if sink is not None:
        _state.sink = sink

    logger.remove()
    if _state.fmt == "json":
        _state.handler_id = logger.add(_state.sink, level=_state.level, serialize=True)
    else:
        _state.handler_id = logger.add(
            _state.sink,
            level=_state.level,
            format=TEXT_FORMAT,
            colorize=False,
        )
    return _state.handler_id


def set_log_level(level: str) -> None:
    """Re-add the current sink at ``level``, keeping its format."""
    configure(level=level, fmt=_state.fmt)


def set_formatter(fmt: str) -> None:
    configure(level=_state.level, fmt=fmt)


def _merge(fields: Optional[Fields]) -> Fields:
    merged = dict(_default_fields)
    if fields:
        merged.update(fields)
    return merged


def _with_error(err: Optional[BaseException], code: Any, fields: Optional[Fields]) -> Fields:
    merged = dict(fields or {})
    if not is_valid_code(code):
        code = Code.UNKNOWN
    code = Code(code)
    merged["code"] = code.value
    merged["code_description"] = get_code_description(code)
    if err is not None:
        merged["error"] = str(err)
    return _merge(merged)


def debug(message: str, fields: Optional[Fields] = None) -> None:
    logger.opt(depth=1).bind(**_merge(fields)).debug(message)


def info(message: str, fields: Optional[Fields] = None) -> None:
    logger.opt(depth=1).bind(**_merge(fields)).info(message)


def warn(message: str, fields: Optional[Fields] = None) -> None:
    """Log a degraded-but-continuing condition."""
    logger.opt(depth=1).bind(**_merge(fields)).warning(message)


def error(
    message: str,
    err: Optional[BaseException],
    code: Any = Code.UNKNOWN,
    fields: Optional[Fields] = None,
) -> None:
    logger.opt(depth=1).bind(**_with_error(err, code, fields)).error(message)


def fatal(
    message: str,
    err: Optional[BaseException],
    code: Any = None,
    fields: Optional[Fields] = None,
) -> None:
    """Log at CRITICAL and terminate by raising ``SystemExit(1)``.

    When ``code`` is omitted it is taken from ``err`` if that carries one.
    The raised ``SystemExit`` is chained from ``err`` so the structured error
    stays reachable through ``__cause__``.
    """
    if code is None:
        code = getattr(err, "code", Code.UNKNOWN)
    logger.opt(depth=1).bind(**_with_error(err, code, fields)).critical(message)
    raise SystemExit(1) from err
