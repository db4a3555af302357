from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import redis

from conftest import StubSource, warnings_in
from confstack import EnvironmentConfigSource, FileConfigSource, MemoryFileSystem, initialize
from confstack.core.source import ConfigSource
from confstack.errors import Code, SourceUnavailable
from confstack.sources.redis_kv import RedisConfigSource


class TestEnvironmentSource:
    def test_prefix_filter_and_key_mapping(self):
        environ = {
            "APP_DATABASE__HOST": "db",
            "APP_DEBUG": "1",
            "APP_": "ignored",
            "OTHER": "x",
        }
        source = EnvironmentConfigSource("APP_", 900, environ=environ)

        assert source.read() == {"database.host": "db", "debug": "1"}
        assert source.priority() == 900

    def test_case_is_kept_when_requested(self):
        source = EnvironmentConfigSource("APP_", 1, environ={"APP_Mixed": "v"}, lowercase=False)
        assert source.read() == {"Mixed": "v"}

    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("CONFSTACK_TEST__LEVEL", "debug")
        source = EnvironmentConfigSource("CONFSTACK_TEST__", 1)
        assert source.read()["level"] == "debug"

    def test_overrides_file_defaults(self):
        fs = MemoryFileSystem({"/etc/app/app.yaml": "database:\n  host: localhost\n  port: 5432\n"})
        agg = initialize(
            FileConfigSource(["/etc/app"], True, "app", "yaml", 100, fs=fs),
            EnvironmentConfigSource("APP_", 900, environ={"APP_DATABASE__HOST": "db.prod"}),
        )

        assert agg.section("database") == {"host": "db.prod", "port": 5432}


class TestRedisSource:
    def _client(self, data):
        client = MagicMock()
        client.keys.return_value = list(data)
        client.mget.side_effect = lambda keys: [data[k] for k in keys]
        return client

    def test_reads_prefixed_keys(self):
        client = self._client({"svc:db.host": "db", "svc:timeout": b"30"})
        source = RedisConfigSource(client, 500, prefix="svc:")

        assert source.read() == {"db.host": "db", "timeout": "30"}
        client.keys.assert_called_once_with("svc:*")
        assert source.priority() == 500

    def test_empty_keyspace_skips_mget(self):
        client = self._client({})
        assert RedisConfigSource(client, 1).read() == {}
        client.mget.assert_not_called()

    def test_required_connection_failure(self):
        client = MagicMock()
        client.keys.side_effect = redis.ConnectionError("refused")
        source = RedisConfigSource(client, 1, name="redis:test")

        with pytest.raises(SourceUnavailable) as excinfo:
            source.read()
        assert excinfo.value.code is Code.THIRD_PARTY
        assert isinstance(excinfo.value.cause, redis.ConnectionError)

    def test_optional_connection_failure_warns(self, log_records):
        client = MagicMock()
        client.keys.side_effect = redis.ConnectionError("refused")
        source = RedisConfigSource(client, 1, required=False, name="redis:test")

        assert source.read() == {}
        warnings = warnings_in(log_records)
        assert warnings[-1]["extra"]["source"] == "redis:test"
        assert warnings[-1]["extra"]["code"] == Code.THIRD_PARTY.value

    def test_optional_undecodable_value_warns(self, log_records):
        client = self._client({b"svc:token": b"\xff\xfe"})
        source = RedisConfigSource(client, 1, prefix="svc:", required=False, name="redis:raw")

        assert source.read() == {}
        warnings = warnings_in(log_records)
        assert len(warnings) == 1
        assert warnings[0]["extra"]["source"] == "redis:raw"
        assert "utf-8" in warnings[0]["extra"]["error"]

    def test_required_undecodable_value(self):
        client = self._client({b"token": b"\xff\xfe"})
        source = RedisConfigSource(client, 1)

        with pytest.raises(SourceUnavailable) as excinfo:
            source.read()
        assert isinstance(excinfo.value.cause, UnicodeDecodeError)

    def test_url_builds_client(self, monkeypatch):
        built = MagicMock()
        from_url = MagicMock(return_value=built)
        monkeypatch.setattr(redis.Redis, "from_url", from_url)

        source = RedisConfigSource("redis://localhost:6379/0", 1)

        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)
        assert source.client is built
        assert source.name == "redis:redis://localhost:6379/0"


@pytest.mark.parametrize(
    "source",
    [
        StubSource(1, {}),
        EnvironmentConfigSource("X_", 1, environ={}),
        FileConfigSource(["/"], False, "app", "yaml", 1, fs=MemoryFileSystem()),
        RedisConfigSource(MagicMock(), 1),
    ],
)
def test_sources_satisfy_protocol(source):
    assert isinstance(source, ConfigSource)
