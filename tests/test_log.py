from __future__ import annotations

import io
import json

import pytest

from confstack import log
from confstack.errors import Code


def test_default_fields_are_attached(log_records):
    log.info("hello", {"component": "test"})

    record = log_records[-1]
    assert record["message"] == "hello"
    assert record["extra"]["component"] == "test"
    assert record["extra"]["app_name"] == "unknown"
    assert record["extra"]["environment"] == "local"


def test_caller_fields_override_defaults(log_records):
    log.warn("override", {"app_name": "custom"})

    assert log_records[-1]["extra"]["app_name"] == "custom"
    assert log_records[-1]["level"].name == "WARNING"


def test_initialize_updates_defaults(log_records):
    log.initialize(log.LoggerConfig(app_name="svc", app_version="1.2.3"))
    log.debug("after init")

    extra = log_records[-1]["extra"]
    assert extra["app_name"] == "svc"
    assert extra["app_version"] == "1.2.3"
    # empty values leave the previous default in place
    assert extra["environment"] == "local"


def test_error_adds_code_fields(log_records):
    log.error("failed", ValueError("bad"), Code.CONFIG_INVALID, {"key": "port"})

    extra = log_records[-1]["extra"]
    assert extra["code"] == "1802"
    assert extra["code_description"] == "Configuration value is invalid or out of range"
    assert extra["error"] == "bad"
    assert extra["key"] == "port"


def test_error_with_invalid_code_falls_back_to_unknown(log_records):
    log.error("failed", None, "not-a-code")

    extra = log_records[-1]["extra"]
    assert extra["code"] == Code.UNKNOWN.value
    assert "error" not in extra


def test_fatal_logs_critical_and_exits(log_records):
    err = RuntimeError("fatal")

    with pytest.raises(SystemExit) as excinfo:
        log.fatal("stop", err, Code.CONFIG)

    assert excinfo.value.code == 1
    assert excinfo.value.__cause__ is err
    assert log_records[-1]["level"].name == "CRITICAL"
    assert log_records[-1]["extra"]["code"] == Code.CONFIG.value


def test_fatal_takes_code_from_error(log_records):
    from confstack.errors import RequiredFileNotFound

    with pytest.raises(SystemExit):
        log.fatal("stop", RequiredFileNotFound("missing"))

    assert log_records[-1]["extra"]["code"] == Code.CONFIG_MISSING.value


def test_json_sink_serializes_fields():
    buffer = io.StringIO()
    log.configure(level="debug", fmt="json", sink=buffer)

    log.warn("serialized", {"path": "/etc"})

    payload = json.loads(buffer.getvalue().splitlines()[-1])
    assert payload["record"]["message"] == "serialized"
    assert payload["record"]["extra"]["path"] == "/etc"


def test_level_filtering_and_env_override(monkeypatch):
    buffer = io.StringIO()
    log.configure(level="warn", sink=buffer)
    log.info("hidden")
    log.warn("shown")
    assert "hidden" not in buffer.getvalue()
    assert "shown" in buffer.getvalue()

    monkeypatch.setenv("LOGURU_LEVEL", "debug")
    log.set_log_level("error")
    log.debug("now visible")
    assert "now visible" in buffer.getvalue()


@pytest.mark.parametrize(
    "name, expected",
    [("debug", "DEBUG"), ("WARN", "WARNING"), ("warning", "WARNING"), ("fatal", "CRITICAL"), ("bogus", "INFO")],
)
def test_normalize_level(name, expected):
    assert log.normalize_level(name) == expected
