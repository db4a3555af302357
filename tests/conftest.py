from __future__ import annotations

import sys
from typing import Any, Dict, List

import pytest
from loguru import logger

from confstack import log


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test."""
    records: List[Dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    monkeypatch.delenv("LOGURU_LEVEL", raising=False)
    saved = dict(log._default_fields)
    yield
    log._default_fields.clear()
    log._default_fields.update(saved)
    if log._state.handler_id is not None:
        logger.remove()
        logger.add(sys.stderr)
        log._state.handler_id = None
        log._state.sink = sys.stderr
        log._state.level = "INFO"
        log._state.fmt = "text"


class StubSource:
    """In-memory source for aggregator tests."""

    def __init__(self, priority: int, data: Dict[str, Any], name: str = ""):
        self._priority = priority
        self._data = data
        self.name = name or f"stub:{priority}"
        self.reads = 0

    def priority(self) -> int:
        return self._priority

    def read(self) -> Dict[str, Any]:
        self.reads += 1
        return dict(self._data)


class FailingSource:
    def __init__(self, priority: int, exc: Exception):
        self._priority = priority
        self._exc = exc
        self.name = "failing"

    def priority(self) -> int:
        return self._priority

    def read(self) -> Dict[str, Any]:
        raise self._exc


def warnings_in(records):
    return [r for r in records if r["level"].name == "WARNING"]
